"""Streamlit UI for the AI Health Analyzer."""

import os
import time
import uuid

import requests
import streamlit as st

from health_analyzer.forms import AssessmentForm

API_URL = os.environ.get("API_URL", "http://localhost:8000")
CLIENT_ID_HEADER = "X-Client-Id"

st.set_page_config(page_title="AI Health Analyzer", layout="wide")
st.title("AI Health Analyzer")
st.markdown("AI-powered diagnostics: rule-based risk screening plus a health assistant")
st.divider()

try:
    requests.get(f"{API_URL}/health", timeout=5)
except Exception:
    st.error(f"Could not connect to API at {API_URL}. Is the FastAPI server running?")
    st.stop()

try:
    domains = requests.get(f"{API_URL}/analyzers", timeout=5).json()["domains"]
    analyzers = {d: requests.get(f"{API_URL}/analyzers/{d}", timeout=5).json() for d in domains}
except Exception:
    st.error("Could not fetch analyzer list.")
    st.stop()


if "client_id" not in st.session_state:
    st.session_state.client_id = uuid.uuid4().hex
AUTH_HEADERS = {CLIENT_ID_HEADER: st.session_state.client_id}

def _show_level(level: str, levels: list[str]) -> None:
    rank = levels.index(level) if level in levels else 0
    if rank == 0:
        st.success(f"**Risk Level: {level}**")
    elif rank == len(levels) - 1:
        st.error(f"**Risk Level: {level}**")
    else:
        st.warning(f"**Risk Level: {level}**")


def _render_list(title: str, items: list) -> None:
    if items:
        st.markdown(f"### {title}")
        for item in items:
            st.markdown(f"- {item}")


# -- Sidebar: sign in --

with st.sidebar:
    st.subheader("Account")
    try:
        status = requests.get(f"{API_URL}/auth/status", headers=AUTH_HEADERS, timeout=5).json()
    except Exception:
        status = {"is_authenticated": False, "user": None}

    if status["is_authenticated"]:
        user = status["user"] or {}
        st.markdown(f"**{user.get('name') or 'Signed in'}**")
        st.caption(user.get("email", ""))
        if st.button("Sign out"):
            requests.post(f"{API_URL}/auth/logout", headers=AUTH_HEADERS, timeout=10)
            st.rerun()
    else:
        email = st.text_input("Email")
        if st.button("Send code", disabled=not email):
            resp = requests.post(f"{API_URL}/auth/otp", json={"email": email}, headers=AUTH_HEADERS, timeout=15)
            if resp.status_code == 200:
                st.session_state.otp_email = email
                st.success("OTP sent. Check your email for the verification code.")
            else:
                st.error("Failed to send OTP. Please try again.")
        if st.session_state.get("otp_email"):
            code = st.text_input("Verification code", max_chars=6)
            if st.button("Verify", disabled=not code):
                resp = requests.post(
                    f"{API_URL}/auth/login",
                    json={"email": st.session_state.otp_email, "code": code},
                    headers=AUTH_HEADERS,
                    timeout=15,
                )
                if resp.status_code == 200:
                    del st.session_state.otp_email
                    st.rerun()
                else:
                    st.error("Invalid code. Please check and try again.")


tab_names = [analyzers[d]["title"].split(" - ")[0] for d in domains] + ["Health Assistant"]
tabs = st.tabs(tab_names)


# -- Analyzer tabs --

for domain, tab in zip(domains, tabs):
    info = analyzers[domain]
    key = f"form_{domain}"
    if key not in st.session_state:
        st.session_state[key] = AssessmentForm(domain)
    form: AssessmentForm = st.session_state[key]

    with tab:
        st.subheader(info["title"])
        col1, col2 = st.columns([1, 2])

        with col1:
            for spec in info["fields"]:
                name = spec["name"]
                label = f"{spec['label']} ({spec['unit']})" if spec["unit"] else spec["label"]
                widget_key = f"{domain}_{name}"
                if spec["kind"] == "choice":
                    options = [""] + list(spec["choices"])
                    value = st.selectbox(
                        label,
                        options,
                        index=options.index(form.values[name]) if form.values[name] in options else 0,
                        format_func=lambda v, c=spec["choices"]: c.get(v, "Select..."),
                        key=widget_key,
                    )
                else:
                    value = st.text_input(label, value=str(form.values[name]), key=widget_key)
                form.update(name, value)

            run = st.button("Analyze", type="primary", key=f"run_{domain}", use_container_width=True)
            if st.button("Reset", key=f"reset_{domain}", use_container_width=True):
                form.reset()
                for spec in info["fields"]:
                    st.session_state.pop(f"{domain}_{spec['name']}", None)
                st.rerun()

        with col2:
            if run:
                with st.spinner("Analyzing..."):
                    time.sleep(info["analysis_delay"])
                    try:
                        resp = requests.post(f"{API_URL}/assess/{domain}", json=form.values, timeout=30)
                        if resp.status_code == 200:
                            form.accept(resp.json())
                        else:
                            st.error(f"API error: {resp.status_code} - {resp.text}")
                    except requests.exceptions.Timeout:
                        st.error("Request timed out.")
                    except Exception as e:
                        st.error(f"Error: {str(e)}")

            if form.result is not None:
                result = form.result.model_dump()
                _show_level(result["risk_level"], info["levels"])
                st.metric("Confidence", f"{result['confidence']}%")
                st.caption(f"Risk score: {result['score']}")
                if result.get("anemia_type"):
                    st.markdown(f"**Anemia type:** {result['anemia_type']}")
                if result.get("lab_values"):
                    st.table(result["lab_values"])
                _render_list("Possible Conditions", result.get("possible_conditions", []))
                _render_list("Key Factors", result.get("key_factors", []))
                _render_list("Risk Factors", result.get("risk_factors", []))
                _render_list("Recommended Screening", result.get("screening_tests", []))
                _render_list("Recommendations", result["recommendations"])
                st.caption("This screening is informational only. Consult a healthcare professional.")
            else:
                st.info("Fill in the form and click 'Analyze' to begin.")


# -- Health Assistant tab --

with tabs[-1]:
    st.subheader("Health Assistant")

    if "chat_session_id" not in st.session_state:
        st.session_state.chat_session_id = str(uuid.uuid4())
    if "chat_messages" not in st.session_state:
        st.session_state.chat_messages = []

    if not status["is_authenticated"]:
        st.info("Sign in from the sidebar to chat with the health assistant.")
    else:
        if st.button("New Chat", key="new_chat"):
            requests.delete(f"{API_URL}/chat/{st.session_state.chat_session_id}", timeout=5)
            st.session_state.chat_session_id = str(uuid.uuid4())
            st.session_state.chat_messages = []
            st.rerun()

        for msg in st.session_state.chat_messages:
            with st.chat_message(msg["role"]):
                st.markdown(msg["content"])

        user_input = st.chat_input("Ask about symptoms, lifestyle or wellness...")
        if user_input:
            with st.chat_message("user"):
                st.markdown(user_input)

            with st.chat_message("assistant"):
                try:
                    resp = requests.post(
                        f"{API_URL}/chat",
                        json={"session_id": st.session_state.chat_session_id, "message": user_input},
                        headers=AUTH_HEADERS,
                        stream=True,
                        timeout=60,
                    )
                    if resp.status_code == 200:
                        answer = st.write_stream(resp.iter_content(chunk_size=None, decode_unicode=True))
                        st.session_state.chat_messages.append({"role": "user", "content": user_input})
                        st.session_state.chat_messages.append({"role": "assistant", "content": answer})
                    else:
                        st.error(f"API error: {resp.status_code} - {resp.text}")
                except requests.exceptions.Timeout:
                    st.error("Request timed out. Try a shorter question.")
                except Exception as e:
                    st.error(f"Error: {str(e)}")
