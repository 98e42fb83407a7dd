# app/ui/login.py

import streamlit as st
from app.providers import sign_in, sign_out
from app.services.api import Failure, login_user, register_user


def logout(cookies):
    sign_out(cookies)
    st.session_state.pop("page", None)


def login_page(cookies):
    st.title("Sign in")

    if "show_register" not in st.session_state:
        st.session_state["show_register"] = False

    if st.session_state["show_register"]:
        show_register_form()
    else:
        show_login_form(cookies)


def show_login_form(cookies):
    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in")

    if submitted:
        with st.spinner("Signing in..."):
            result = login_user(email, password)
            if isinstance(result, Failure):
                st.error(result.message)
                return
            session = sign_in(cookies, result.data)
            if isinstance(session, Failure):
                st.error(session.message)
                return
        st.session_state["page"] = "articles"
        st.rerun()

    if st.button("Create an account"):
        st.session_state["show_register"] = True
        st.rerun()


def show_register_form():
    st.subheader("Create an account")

    name = st.text_input("Name", key="new_name")
    email = st.text_input("Email", key="new_email")
    password = st.text_input("Password", type="password", key="new_password")

    if st.button("Sign up"):
        with st.spinner("Creating account..."):
            result = register_user(name, email, password)
        if isinstance(result, Failure):
            st.error(result.message)
        else:
            st.success("Account created. You can sign in now.")
            st.session_state["show_register"] = False
            st.rerun()

    if st.button("← Back to sign in"):
        st.session_state["show_register"] = False
        st.rerun()
