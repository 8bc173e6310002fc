# ui/dashboard.py
import sys, os
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
import streamlit as st
import requests
import pandas as pd
from ui.state import (
    MAX_RESUMES,
    add_resume,
    can_add,
    can_remove,
    criteria_view,
    find_evaluation,
    initial_resumes,
    remove_resume,
    select_initial,
    top_evaluations,
    update_resume,
    valid_resumes,
)

# -------------------- CONFIG --------------------
API_URL = os.getenv("API_URL", "http://localhost:8000")
st.set_page_config(page_title="FairScreen", page_icon="🛡️", layout="wide")
st.title("🛡️ FairScreen: Bias-Free Resume Evaluator")

st.markdown(
    f"Add up to {MAX_RESUMES} resumes. Each one is evaluated strictly on technical skills, "
    "practical experience, analytical thinking and communication evidence; demographic "
    "details are ignored."
)

CRITERIA_VIEW = criteria_view()

# -------------------- SESSION STATE --------------------
if "api_url" not in st.session_state:
    st.session_state.api_url = API_URL

if "resumes" not in st.session_state:
    st.session_state.resumes = initial_resumes()

# Last screening run (API response) and the candidate shown in detail
if "screening" not in st.session_state:
    st.session_state.screening = None
if "selected_id" not in st.session_state:
    st.session_state.selected_id = None

if "error" not in st.session_state:
    st.session_state.error = None

# Resume ID whose upload was just parsed; shows a success mark on that card
if "upload_ok" not in st.session_state:
    st.session_state.upload_ok = None


def _text_key(rid):
    return f"resume_text_{rid}"


def _sync_text(rid):
    st.session_state.resumes = update_resume(
        st.session_state.resumes, rid, st.session_state.get(_text_key(rid), "")
    )


def _extract_upload(rid):
    uploaded = st.session_state.get(f"resume_file_{rid}")
    if uploaded is None:
        return
    files = {"file": (uploaded.name, uploaded.getvalue(), uploaded.type or "application/pdf")}
    st.session_state.error = None
    try:
        r = requests.post(f"{st.session_state.api_url}/resumes/extract", files=files, timeout=90)
    except requests.exceptions.RequestException as e:
        st.session_state.error = f"❌ Connection error: {e}"
        return
    if r.status_code != 200:
        detail = r.json().get("detail") if r.headers.get("content-type", "").startswith("application/json") else r.text
        st.session_state.error = detail or "Failed to parse PDF. Please try pasting the text manually."
        return
    text = r.json()["text"]
    st.session_state[_text_key(rid)] = text
    st.session_state.resumes = update_resume(st.session_state.resumes, rid, text)
    st.session_state.upload_ok = rid


def _add():
    st.session_state.resumes = add_resume(st.session_state.resumes)


def _remove(rid):
    st.session_state.resumes = remove_resume(st.session_state.resumes, rid)
    st.session_state.pop(_text_key(rid), None)


def _start_screening():
    resumes = valid_resumes(st.session_state.resumes)
    if not resumes:
        st.session_state.error = "Please add at least one resume text."
        return
    st.session_state.error = None
    try:
        r = requests.post(
            f"{st.session_state.api_url}/screenings",
            json={"resumes": resumes},
            timeout=300,
        )
    except requests.exceptions.RequestException as e:
        st.session_state.error = f"Screening failed. Please check your API key and try again. ({e})"
        return
    if r.status_code != 200:
        try:
            detail = r.json().get("detail")
        except ValueError:
            detail = r.text
        st.session_state.error = f"Screening failed. Please check your API key and try again. ({detail})"
        return
    run = r.json()
    st.session_state.screening = run
    st.session_state.selected_id = select_initial(run["result"])


def render_evaluation(evaluation):
    with st.container(border=True):
        head, total = st.columns([3, 1])
        head.markdown(f"### 📄 Resume {evaluation['resumeId']}")
        total.metric("Total Score", f"{evaluation['totalScore']:.0f}/100")

        st.markdown("#### 📊 Criterion Breakdown")
        for key, label, weight in CRITERIA_VIEW:
            score = evaluation["scores"].get(key, 0)
            st.progress(int(max(0, min(100, score))), text=f"{label} ({weight}): {score:.0f}")

        strengths_col, gaps_col = st.columns(2)
        with strengths_col:
            st.markdown("#### ✅ Key Strengths")
            for s in evaluation.get("strengths", []) or ["—"]:
                st.markdown(f"- {s}")
        with gaps_col:
            st.markdown("#### ⚠️ Identified Gaps")
            for g in evaluation.get("gaps", []) or ["—"]:
                st.markdown(f"- {g}")

        st.markdown("#### 📝 Justification")
        st.write(evaluation.get("justification") or "—")


def render_result(run):
    result = run["result"]
    screened = f"screened {len(run['resumeIds'])} resume(s) with {run['model']}"
    if (result.get("fairnessCheck") or "").strip():
        st.success(f"✅ Fairness compliant: {screened}")
    else:
        st.warning(f"⚠️ No fairness statement returned: {screened}")

    st.markdown("### 🏆 Top Candidates")
    top = top_evaluations(result)
    if top:
        cols = st.columns(len(top))
        for rank, (col, ev) in enumerate(zip(cols, top), start=1):
            selected = ev["resumeId"] == st.session_state.selected_id
            label = f"#{rank} · Resume {ev['resumeId']} · {ev['totalScore']:.0f}"
            if col.button(label, key=f"top_{run['id']}_{ev['resumeId']}", type="primary" if selected else "secondary"):
                st.session_state.selected_id = ev["resumeId"]
                st.rerun()
    else:
        st.info("The model did not rank any candidates.")

    evaluation = find_evaluation(result, st.session_state.selected_id)
    if evaluation:
        render_evaluation(evaluation)

    with st.expander("📋 All Evaluations"):
        table = pd.DataFrame(
            [
                {
                    "Resume": ev["resumeId"],
                    "Total": ev["totalScore"],
                    **{label: ev["scores"].get(key) for key, label, _ in CRITERIA_VIEW},
                }
                for ev in result["evaluations"]
            ]
        ).sort_values("Total", ascending=False)
        st.dataframe(table, hide_index=True, use_container_width=True)

    st.markdown("### 🛡️ Fairness Compliance Check")
    st.info(f"\"{result.get('fairnessCheck') or 'No statement returned.'}\"")


# -------------------- TABS --------------------
tab1, tab2 = st.tabs(["🔍 Screen Resumes", "🗂️ History"])

# ==================== TAB 1: Screen Resumes ====================
with tab1:
    left, right = st.columns([1, 2])

    with left:
        st.subheader(f"Resume Inputs ({len(st.session_state.resumes)}/{MAX_RESUMES})")
        st.button("➕ Add Resume", on_click=_add, disabled=not can_add(st.session_state.resumes))

        for idx, resume in enumerate(st.session_state.resumes, start=1):
            rid = resume["id"]
            if _text_key(rid) not in st.session_state:
                st.session_state[_text_key(rid)] = resume["text"]
            with st.container(border=True):
                title, remove = st.columns([4, 1])
                mark = " ✅" if st.session_state.upload_ok == rid else ""
                title.markdown(f"**Resume #{idx}** (ID {rid}){mark}")
                remove.button(
                    "🗑️",
                    key=f"remove_{rid}",
                    on_click=_remove,
                    args=(rid,),
                    disabled=not can_remove(st.session_state.resumes),
                )
                st.text_area(
                    "Resume text",
                    key=_text_key(rid),
                    on_change=_sync_text,
                    args=(rid,),
                    height=150,
                    placeholder="Paste resume text here...",
                    label_visibility="collapsed",
                )
                st.file_uploader(
                    "Upload PDF",
                    type=["pdf", "docx", "txt"],
                    key=f"resume_file_{rid}",
                    on_change=_extract_upload,
                    args=(rid,),
                )

        if st.session_state.error:
            st.error(st.session_state.error)

    with right:
        if st.button("🔍 Start Screening", type="primary"):
            with st.spinner("Extracting skills and experience while filtering out demographic data..."):
                _start_screening()
            st.rerun()

        if st.session_state.screening:
            render_result(st.session_state.screening)
        else:
            st.info(
                f"Add up to {MAX_RESUMES} resumes in the left panel, then start screening. "
                "Candidates are evaluated strictly on job-related evidence."
            )

# ==================== TAB 2: History ====================
with tab2:
    st.subheader("Past Screenings")
    try:
        resp = requests.get(f"{st.session_state.api_url}/screenings", timeout=30)
        runs = resp.json() if resp.status_code == 200 else []
    except requests.exceptions.RequestException:
        runs = []

    if not runs:
        st.warning("⚠️ No screenings stored yet.")
    else:
        st.dataframe(
            pd.DataFrame(
                [
                    {
                        "ID": r["id"],
                        "Created": r["createdAt"],
                        "Model": r["model"],
                        "Resumes": r["resumeCount"],
                        "Top Candidates": ", ".join(r["topCandidates"]),
                    }
                    for r in runs
                ]
            ),
            hide_index=True,
            use_container_width=True,
        )
        options = {f"#{r['id']} – {r['createdAt']}": r["id"] for r in runs}
        chosen = st.selectbox("Open screening", options=list(options.keys()))
        if st.button("📂 Load"):
            r = requests.get(f"{st.session_state.api_url}/screenings/{options[chosen]}", timeout=30)
            if r.status_code == 200:
                run = r.json()
                st.session_state.screening = run
                st.session_state.selected_id = select_initial(run["result"])
                st.success("Loaded. Switch to the Screen Resumes tab to review it.")
            else:
                st.error(f"❌ Could not load screening: {r.text}")
