"""
Account Panel Component

Sidebar sign-in / sign-up / sign-out. Accounts are optional: the wizard
works the same without one, but reports and clinics are only saved for
signed-in users.
"""

from typing import Optional

import streamlit as st
from streamlit.components.v1 import html

from auth_service import AuthService
from report_wizard import User


def render_account_panel(auth: AuthService) -> Optional[User]:
    """
    Render the account panel in the sidebar.

    Returns:
        The signed-in user after any action taken this run, or None
    """
    with st.sidebar:
        st.markdown("### 👤 Conta")

        user = auth.get_current_user()
        cookie_script = auth.pending_cookie_script()
        if cookie_script:
            html(cookie_script, height=0)

        if user is not None:
            st.caption(f"Sessão iniciada como **{user.email}**")
            if st.button("Terminar sessão", key="auth_sign_out", width="stretch"):
                error = auth.sign_out()
                if error:
                    st.warning(f"Sessão terminada localmente: {error}")
                st.rerun()
            return user

        is_configured, _ = auth.is_configured()
        if not is_configured:
            st.caption("Contas indisponíveis. Pode continuar sem conta.")
            return None

        sign_in_tab, sign_up_tab = st.tabs(["Entrar", "Criar conta"])

        with sign_in_tab:
            with st.form("sign_in_form"):
                email = st.text_input("Email", key="auth_sign_in_email")
                password = st.text_input("Senha", type="password", key="auth_sign_in_password")
                submitted = st.form_submit_button("Entrar", width="stretch")
            if submitted:
                result = auth.sign_in(email, password)
                if result.success:
                    st.rerun()
                st.error(result.error_message)

        with sign_up_tab:
            with st.form("sign_up_form"):
                email = st.text_input("Email", key="auth_sign_up_email")
                password = st.text_input("Senha", type="password", key="auth_sign_up_password")
                submitted = st.form_submit_button("Criar conta", width="stretch")
            if submitted:
                result = auth.sign_up(email, password)
                if not result.success:
                    st.error(result.error_message)
                elif result.needs_confirmation:
                    st.info("Conta criada! Verifique o seu email para confirmar o registo.")
                else:
                    st.rerun()

    return None
