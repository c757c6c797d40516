# app/pages/04_Profile.py
import streamlit as st

from auth import authed, get_client, logout, require_login
from errors import SalesHubError
from store import fetch_profile, update_profile

st.set_page_config(page_title="Profile – SalesHub", layout="centered")
session = require_login()

client = get_client()

st.title("👤 Profile")

try:
    profile = authed(client, fetch_profile)
except SalesHubError as e:
    st.error(f"Could not load profile: {e}")
    profile = None

username = profile.username if profile else ""
email = profile.email if profile else session.email
name = profile.name if profile else session.name

with st.form("profile_form"):
    st.text_input("Username", value=username, disabled=True, help="Your unique username (auto-generated)")
    new_name = st.text_input("Full Name", value=name, placeholder="Enter your name")
    st.text_input("Email Address", value=email, disabled=True, help="Email cannot be changed")
    submitted = st.form_submit_button("Update Profile", use_container_width=True)

if submitted:
    try:
        authed(client, update_profile, new_name)
        st.success("Profile updated successfully")
    except SalesHubError as e:
        st.error(str(e) or "Failed to update profile")

st.markdown("---")
st.subheader("Danger Zone")
st.caption("Sign out of your account")
if st.button("🚪 Sign Out", type="primary"):
    logout(client)
    st.switch_page("Home.py")
