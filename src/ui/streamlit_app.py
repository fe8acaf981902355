"""
Streamlit UI -- Prompt Dashboard.

Features:
  - Persistent prompt history (session state)
  - Sidebar with the dataset catalog
  - One rendered component per interpretation (chart / table / summary card)
  - Collapsible interpretation JSON and fallback details
"""
import json
import os

import httpx
import pandas as pd
import streamlit as st


API_BASE = os.getenv("API_BASE_URL", "http://localhost:8000")
_TIMEOUT = 30

st.set_page_config(
    page_title="Prompt Dashboard",
    page_icon="bar_chart",
    layout="wide",
    initial_sidebar_state="expanded",
)


if "messages" not in st.session_state:
    st.session_state.messages = []

if "catalog" not in st.session_state:
    st.session_state.catalog = None



def _load_catalog():
    """Fetch /catalog from the API; cache in session_state."""
    try:
        st.session_state.catalog = httpx.get(f"{API_BASE}/catalog", timeout=5).json()
    except (httpx.HTTPError, ValueError):
        st.session_state.catalog = None


def _query_params(interp: dict) -> dict:
    params = {"type": interp["datasetType"]}
    if interp.get("filters"):
        params["filters"] = json.dumps(interp["filters"])
    if interp.get("sort"):
        params["sort"] = json.dumps(interp["sort"])
    if interp.get("limit"):
        params["limit"] = interp["limit"]
    return params


def _fetch_rows(interp: dict) -> list[dict]:
    resp = httpx.get(f"{API_BASE}/data", params=_query_params(interp), timeout=_TIMEOUT)
    resp.raise_for_status()
    return resp.json()


def _fetch_summary(interp: dict) -> dict:
    params = _query_params(interp)
    params.pop("sort", None)
    params.pop("limit", None)
    resp = httpx.get(f"{API_BASE}/data/summary", params=params, timeout=_TIMEOUT)
    resp.raise_for_status()
    return resp.json()


with st.sidebar:
    st.title("Datasets")

    if st.button("Refresh catalog", use_container_width=True):
        _load_catalog()

    if st.session_state.catalog is None:
        _load_catalog()

    catalog = st.session_state.catalog
    if catalog:
        for ds in catalog.get("datasets", []):
            st.subheader(ds["name"])
            st.caption(ds.get("description", ""))
            st.markdown("\n".join(f"- `{f['name']}` ({f['type']})" for f in ds.get("fields", [])))
    else:
        st.info("API not reachable -- start the FastAPI server first.\n\n```\nuvicorn src.api.main:app --reload\n```")

    st.divider()
    mode = st.selectbox("Interpreter", ["mock", "openai", "anthropic"], index=0,
                        help="'mock' is the rule-based interpreter; hosted modes fall back to it on failure.")



st.title("Prompt Dashboard")
st.markdown("Describe what you want to see. Each dataset you mention gets its own chart, table or summary card.")

with st.expander("Example prompts", expanded=False):
    examples = [
        "show top 5 users where role is admin",
        "bar chart of sales revenue",
        "products price below 100 sorted by rating desc",
        "summary of users",
        "line chart of profit trend",
        "show products list and users list",
    ]
    cols = st.columns(2)
    for i, ex in enumerate(examples):
        if cols[i % 2].button(ex, key=f"ex_{i}", use_container_width=True):
            st.session_state.prefill = ex


def _render_chart(interp: dict, rows: list[dict]):
    df = pd.DataFrame(rows)
    if df.empty:
        st.info("No rows match.")
        return
    numeric = df.select_dtypes("number").columns.tolist()
    numeric = [c for c in numeric if c != "id"]
    label = next((c for c in ("month", "name") if c in df.columns), None)
    data = df.set_index(label)[numeric] if label else df[numeric]

    chart_type = interp.get("chartType", "bar")
    if chart_type == "line":
        st.line_chart(data)
    elif chart_type == "area":
        st.area_chart(data)
    else:
        st.bar_chart(data)


def _render_card(summary: dict):
    cols = st.columns(min(len(summary), 4) or 1)
    for i, (key, value) in enumerate(summary.items()):
        cols[i % len(cols)].metric(label=key, value=value)


def _render_component(interp: dict):
    st.subheader(interp.get("title", ""))
    st.caption(interp.get("description", ""))
    try:
        if interp["componentType"] == "card":
            _render_card(_fetch_summary(interp))
            return
        rows = _fetch_rows(interp)
    except (httpx.HTTPError, ValueError) as exc:
        st.error(f"Could not load {interp['datasetType']}: {exc}")
        return

    if interp["componentType"] == "chart":
        _render_chart(interp, rows)
    else:
        st.dataframe(pd.DataFrame(rows), use_container_width=True)


def _render_response(data: dict):
    source = data.get("source", "rules")
    badge = f"  ·  fell back: {data['fallback_reason']}" if data.get("fallback_reason") else ""
    st.success(f"Interpreted by {source}  ·  {data.get('latency_ms', 0)} ms{badge}")

    for interp in data.get("interpretations", []):
        _render_component(interp)

    with st.expander("Interpretations", expanded=False):
        st.json(data.get("interpretations", []))


for msg in st.session_state.messages:
    with st.chat_message(msg["role"]):
        if msg["role"] == "user":
            st.markdown(msg["content"])
        else:
            _render_response(msg["data"])



prefill = st.session_state.pop("prefill", None)
prompt = st.chat_input("What do you want to see?") or prefill

if prompt:
    st.session_state.messages.append({"role": "user", "content": prompt})
    with st.chat_message("user"):
        st.markdown(prompt)

    with st.chat_message("assistant"):
        with st.spinner("Interpreting..."):
            try:
                resp = httpx.post(
                    f"{API_BASE}/interpret",
                    json={"prompt": prompt, "mode": mode},
                    timeout=_TIMEOUT,
                )
                resp.raise_for_status()
                data = resp.json()
            except httpx.ConnectError:
                st.error("Cannot reach the API. Start it with:\n```\nuvicorn src.api.main:app --reload\n```")
                st.stop()
            except httpx.HTTPStatusError as exc:
                st.error(f"API returned {exc.response.status_code}: {exc.response.text}")
                st.stop()
            except (httpx.HTTPError, ValueError) as exc:
                st.error(f"Interpret request failed: {exc}")
                st.stop()

        _render_response(data)
        st.session_state.messages.append({"role": "assistant", "data": data})
