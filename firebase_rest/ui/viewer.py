# ui/viewer.py  (Firestore document viewer)
# run with: streamlit run firebase_rest/ui/viewer.py
import logging
import os

import streamlit as st
import streamlit.components.v1 as components

from firebase_rest.core.errors import FirebaseError
from firebase_rest.firebase_client import FirebaseConfig
from firebase_rest.services.auth import FirebaseAuth
from firebase_rest.services.firestore import Firestore
from firebase_rest.ui.render import document_rows, render_fields_table

logging.basicConfig(level=os.environ.get("LOGLEVEL", "INFO"))
logger = logging.getLogger(__name__)


st.set_page_config(
    page_title="Firestore Viewer",
    page_icon="📡",
    layout="wide",
)


# ------------------------------------------------------------
# Helper functions
# ------------------------------------------------------------

def load_config():
    try:
        section = st.secrets["firebase"]
    except (KeyError, FileNotFoundError):
        return FirebaseConfig.from_env()
    return FirebaseConfig.from_mapping(section)


def session_clients():
    # one auth/firestore pair per browser session; the process-wide
    # Firebase singleton would share a signed-in user between visitors
    if "fs_auth" not in st.session_state:
        cfg = load_config()
        auth = FirebaseAuth(cfg.api_key, timeout=cfg.timeout)
        st.session_state["fs_auth"] = auth
        st.session_state["fs_client"] = Firestore(cfg.project_id, auth=auth, timeout=cfg.timeout)
    return st.session_state["fs_auth"], st.session_state["fs_client"]


try:
    auth, firestore = session_clients()
except ValueError as e:
    st.error(f"Firebase is not configured: {e}")
    st.stop()


# ------------------------------------------------------------
# 1. LOGIN
# ------------------------------------------------------------
if not auth.is_logged_in:
    st.header("🔐 Login")

    email = st.text_input("Email")
    password = st.text_input("Password", type="password")

    if st.button("Login"):
        try:
            auth.sign_in_with_password(email, password)
            st.success("Login successful!")
            st.rerun()
        except FirebaseError as e:
            st.error(f"Login failed: {e}")
    st.stop()

st.sidebar.success("Logged in as: " + (auth.current_user.email or "?"))
if st.sidebar.button("Logout"):
    auth.sign_out()
    st.session_state.clear()
    st.rerun()


# ------------------------------------------------------------
# 2. BROWSE
# ------------------------------------------------------------
st.header("📂 Documents")

path = st.text_input("Collection path", value=st.session_state.get("fs_path", ""))
page_size = st.number_input("Page size", min_value=1, max_value=300, value=20)

if path != st.session_state.get("fs_path"):
    st.session_state["fs_path"] = path
    st.session_state["fs_tokens"] = [None]

if not path:
    st.stop()

tokens = st.session_state.setdefault("fs_tokens", [None])

try:
    collection = firestore.collection(path)
    page = collection.list_documents(page_size=int(page_size), page_token=tokens[-1])
except FirebaseError as e:
    st.error(str(e))
    st.stop()

if not page.documents:
    st.info("No documents.")

for doc in page.documents:
    with st.expander(f"📄 {doc.id}", expanded=False):
        st.caption(f"created {doc.create_time} · updated {doc.update_time}")
        rows = document_rows(doc)
        if rows:
            components.html(render_fields_table(rows), height=40 + 30 * (len(rows) + 1), scrolling=True)
        else:
            st.write("(no fields)")

col1, col2 = st.columns(2)
with col1:
    if len(tokens) > 1 and st.button("⬅ Previous"):
        tokens.pop()
        st.rerun()
with col2:
    if page.next_page_token and st.button("Next ➡"):
        tokens.append(page.next_page_token)
        st.rerun()
