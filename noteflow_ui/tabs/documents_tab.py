import html

import streamlit as st

from noteflow_ui.pdf_viewer import MAX_ZOOM, MIN_ZOOM, ZOOM_STEP, NotAPdfError, PdfLibrary
from noteflow_ui.state import session_slices


def _library() -> PdfLibrary:
    return session_slices.setdefault("documents", "library", PdfLibrary)


def render_upload(library):
    upload = st.file_uploader("Upload a PDF", key="documents.upload")
    if not upload:
        return
    try:
        document = library.accept_upload(upload.file_id, upload.name, upload.type, upload.getvalue())
        if document is None:
            return
        st.session_state["documents.active"] = document.id
        st.toast(f"Opened {document.name} ({document.total_pages} pages)")
    except NotAPdfError as exc:
        st.error(str(exc))


def render_controls(document):
    cols = st.columns([1, 1, 1.2, 1, 1, 1, 1])
    if cols[0].button("◀", key="documents.prev", disabled=document.current_page <= 1):
        document.previous_page()
        st.rerun()
    if cols[1].button("▶", key="documents.next", disabled=document.current_page >= document.total_pages):
        document.next_page()
        st.rerun()
    page = cols[2].number_input(
        "Page",
        min_value=1,
        max_value=document.total_pages,
        value=document.current_page,
        key=f"documents.page.{document.id}.{document.current_page}",
        label_visibility="collapsed",
    )
    if page != document.current_page:
        document.go_to(page)
        st.rerun()
    if cols[3].button("−", key="documents.zoom_out", disabled=document.zoom <= MIN_ZOOM):
        document.zoom_out()
        st.rerun()
    cols[4].markdown(f"<div class='small-label'>{document.zoom}%</div>", unsafe_allow_html=True)
    if cols[5].button("+", key="documents.zoom_in", disabled=document.zoom >= MAX_ZOOM):
        document.zoom_in()
        st.rerun()
    if cols[6].button("⟳", key="documents.rotate", help="Rotate 90°"):
        document.rotate()
        st.rerun()


def render_viewer(document):
    st.markdown(
        f"<div class='small-label'>{html.escape(document.name)} • {document.size_label} • "
        f"page {document.current_page} of {document.total_pages}</div>",
        unsafe_allow_html=True,
    )
    render_controls(document)
    scale = document.zoom / 100
    st.markdown(
        f"<div style='overflow:auto;height:760px'>"
        f"<iframe src='{document.data_uri()}' width='100%' height='{int(740 * scale)}' "
        f"style='border:none;transform:rotate({document.rotation}deg);transform-origin:center'></iframe></div>",
        unsafe_allow_html=True,
    )


def render_documents_tab(ctx):
    library = _library()
    st.markdown("<div class='section-title'>Documents</div>", unsafe_allow_html=True)
    render_upload(library)
    if not library.documents:
        st.caption(f"Upload a PDF to read it here. Zoom moves in {ZOOM_STEP}% steps between {MIN_ZOOM}% and {MAX_ZOOM}%.")
        return

    names = {doc.id: doc.name for doc in library.documents}
    ids = list(names)
    if st.session_state.get("documents.active") not in ids:
        st.session_state["documents.active"] = library.active_id
    cols = st.columns([0.8, 0.2])
    active_id = cols[0].selectbox("Open documents", ids, format_func=names.get, key="documents.active")
    if active_id != library.active_id:
        library.activate(active_id)
    if cols[1].button("Close", key="documents.close"):
        library.remove(library.active_id)
        st.session_state.pop("documents.active", None)
        st.rerun()
    if library.active:
        render_viewer(library.active)
