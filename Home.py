# app/Home.py
import streamlit as st

from auth import current_session, get_client, sign_in, sign_up
from errors import AuthError, ConfigError, SalesHubError

st.set_page_config(
    page_title="SalesHub Login",
    layout="centered",
    initial_sidebar_state="collapsed",
)

# Hide sidebar + Streamlit chrome on login screen
st.markdown(
    """
    <style>
    [data-testid="stSidebar"], header, footer, #MainMenu { display:none !important; }
    .block-container { padding-top: 40px; max-width: 520px; }
    </style>
    """,
    unsafe_allow_html=True,
)

# If already logged in -> go dashboard
if current_session():
    st.switch_page("pages/01_Dashboard.py")

try:
    client = get_client()
except ConfigError as e:
    st.error(f"SalesHub is not configured: {e}")
    st.stop()

if "signup_mode" not in st.session_state:
    st.session_state["signup_mode"] = False
signup = st.session_state["signup_mode"]

st.markdown("## 📈 SalesHub")
st.caption("Create a new account" if signup else "Sign in to your account")

with st.form("auth_form"):
    name = st.text_input("Full Name", placeholder="John Doe") if signup else ""
    email = st.text_input("Email", placeholder="you@example.com")
    password = st.text_input("Password", type="password", placeholder="••••••••")
    submitted = st.form_submit_button("Sign Up" if signup else "Sign In", use_container_width=True)

if submitted:
    if not email or not password:
        st.error("Please fill in all fields")
    elif signup and not name.strip():
        st.error("Please enter your name")
    else:
        try:
            if signup:
                session = sign_up(client, email, password, name)
                if session is None:
                    st.success("Account created. Check your email to confirm it, then sign in.")
                    st.session_state["signup_mode"] = False
                else:
                    st.success("Account created successfully!")
                    st.switch_page("pages/01_Dashboard.py")
            else:
                sign_in(client, email, password)
                st.success("Welcome back!")
                st.switch_page("pages/01_Dashboard.py")
        except AuthError as e:
            st.error(str(e) or ("Failed to sign up" if signup else "Failed to sign in"))
        except SalesHubError as e:
            st.error(f"An error occurred: {e}")

toggle_label = "Already have an account? Sign in" if signup else "Don't have an account? Sign up"
if st.button(toggle_label):
    st.session_state["signup_mode"] = not signup
    st.rerun()
