import streamlit as st
import os
import time
from datetime import datetime
from typing import List, Optional

import pandas as pd
import plotly.graph_objects as go
from streamlit_folium import st_folium

import assistant
import chat_history
import profile_store
from assessment import GeoStatus, Occupation, Step, WaterActivity
from assistant import ChatMessage
from geo.geocoder import place_provider, unavailable_provider
from geo.geofence import distances_to_zones
from geo.map_renderer import create_map
from logger import logger
from risk_engine import RiskTier, risk_tier, tier_label
from snail_classifier import FALLBACK_ANALYSIS
from translations import LANGUAGES, OCCUPATION_LABELS, t
from wizard import RiskAssessmentWizard

GEO_PACING_SECONDS = float(os.getenv("GEO_PACING_SECONDS", "2.0"))

st.set_page_config(
    layout="centered",
    page_title="Schisto-Care",
)

# -----------------------------
# UI theme
# -----------------------------
st.markdown(
    """
<style>
:root {
  --bg: #F8FAFC;
  --card: #ffffff;
  --border: rgba(15,23,42,0.08);
  --muted: #64748b;
  --brand: #2563eb;
}

.block-container { padding-top: 1.2rem; }

.card {
  background: var(--card);
  border: 1px solid var(--border);
  padding: 16px;
  border-radius: 16px;
  margin-bottom: 10px;
}
.small { color: var(--muted); font-size: 0.9rem; }
.zone { background: #fff7ed; border: 1px solid #fed7aa; color: #c2410c; }

div.stButton > button {
  border-radius: 12px !important;
  padding: 0.6rem 0.9rem !important;
}
</style>
""",
    unsafe_allow_html=True,
)

_TIER_COLORS = {
    RiskTier.LOW: "#22c55e",
    RiskTier.MODERATE: "#ca8a04",
    RiskTier.HIGH: "#ef4444",
}


# -----------------------------
# Helpers
# -----------------------------
def _language() -> str:
    return st.session_state.get("language", "en")


def _wizard() -> RiskAssessmentWizard:
    if "wizard" not in st.session_state:
        st.session_state["wizard"] = RiskAssessmentWizard()
    return st.session_state["wizard"]


def _profile() -> Optional[dict]:
    return st.session_state.get("profile")


def _refresh_profile() -> None:
    profile = _profile()
    if profile:
        st.session_state["profile"] = profile_store.get_profile(profile["id"]) or profile


def _score_gauge(score: int, color: str) -> go.Figure:
    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=score,
        number={"suffix": "%"},
        gauge={
            "axis": {"range": [0, 100]},
            "bar": {"color": color},
            "steps": [
                {"range": [0, 20], "color": "#dcfce7"},
                {"range": [20, 50], "color": "#fef9c3"},
                {"range": [50, 100], "color": "#fee2e2"},
            ],
        },
    ))
    fig.update_layout(height=260, margin=dict(l=20, r=20, t=20, b=20))
    return fig


def _nav(wizard: RiskAssessmentWizard, lang: str, back: bool = True, next_label: str = "next") -> None:
    c1, c2 = st.columns(2)
    with c1:
        if back and st.button(t("back", lang), use_container_width=True):
            wizard.back()
            st.rerun()
    with c2:
        if st.button(t(next_label, lang), type="primary", use_container_width=True):
            wizard.next()
            st.rerun()


# -----------------------------
# Risk assessment steps
# -----------------------------
def step_intro(wizard: RiskAssessmentWizard, lang: str) -> None:
    st.subheader(t("intro_title", lang))
    st.write(t("intro_desc", lang))

    place = st.text_input(t("place_prompt", lang), value="", placeholder=t("place_example", lang))
    c1, c2 = st.columns(2)
    with c1:
        start = st.button(t("btn_start", lang), type="primary", use_container_width=True)
    with c2:
        skip = st.button(t("btn_manual", lang), use_container_width=True)

    if not (start or skip):
        return

    provider = place_provider(place) if start else unavailable_provider
    with st.spinner(t("access_gps", lang)):
        status = wizard.locate(provider)

    if status == GeoStatus.FOUND:
        st.success(t("loc_found", lang))
        # Pacing only, so the status can be read before moving on
        time.sleep(GEO_PACING_SECONDS)

    wizard.proceed_to_geo()
    st.rerun()


def step_geo(wizard: RiskAssessmentWizard, lang: str) -> None:
    rec = wizard.record
    st.subheader(t("env_title", lang))

    if wizard.geo_status == GeoStatus.DENIED:
        st.caption(t("gps_denied", lang))
    if rec.detected_zone_name:
        st.markdown(
            f"<div class='card zone'><b>{t('risk_zone', lang)}</b><br/><span class='small'>{rec.detected_zone_name}</span></div>",
            unsafe_allow_html=True,
        )

    lat, lon = rec.coordinates if rec.coordinates else (None, None)
    st_folium(create_map(lat, lon, highlight=rec.detected_zone_name), width=None, height=320)
    if wizard.location_label:
        st.caption(wizard.location_label)
    if rec.coordinates:
        st.markdown(f"**{t('nearest_zones', lang)}**")
        nearest = pd.DataFrame([
            {
                t("col_zone", lang): z["name"],
                t("col_distance", lang): round(z["distance_km"], 1),
                t("col_inside", lang): "\u2713" if z["inside"] else "",
            }
            for z in distances_to_zones(*rec.coordinates, zones=wizard.zones)[:3]
        ])
        st.dataframe(nearest, use_container_width=True, hide_index=True)

    rec.near_water = st.checkbox(t("q_near_water", lang), value=rec.near_water)
    rec.stagnant_water = st.checkbox(t("q_stagnant", lang), value=rec.stagnant_water)

    _nav(wizard, lang, back=False)


def step_behavior(wizard: RiskAssessmentWizard, lang: str) -> None:
    rec = wizard.record
    st.subheader(t("act_title", lang))

    options = list(Occupation)
    choice = st.selectbox(
        t("q_occ", lang),
        options,
        index=options.index(rec.occupation),
        format_func=lambda o: OCCUPATION_LABELS[o.value],
    )
    rec.occupation = Occupation(choice)

    st.markdown(f"**{t('q_water_contact', lang)}**")
    cols = st.columns(len(WaterActivity))
    for col, activity in zip(cols, WaterActivity):
        active = activity in rec.water_contact_activities
        with col:
            if st.checkbox(activity.value.capitalize(), value=active) != active:
                rec.toggle_activity(activity)

    rec.has_latrine_access = st.checkbox(t("q_latrine", lang), value=rec.has_latrine_access)

    _nav(wizard, lang)


def step_clinical(wizard: RiskAssessmentWizard, lang: str) -> None:
    rec = wizard.record
    st.subheader(t("symp_title", lang))

    rec.has_blood_in_urine = st.checkbox(t("q_blood", lang), value=rec.has_blood_in_urine, help="Hematuria")
    rec.has_painful_urination = st.checkbox(t("q_pain", lang), value=rec.has_painful_urination)
    rec.set_age(int(st.slider(t("q_age", lang), min_value=1, max_value=100, value=rec.age)))

    _nav(wizard, lang)


def step_snail(wizard: RiskAssessmentWizard, lang: str) -> None:
    st.subheader(t("snail_title", lang))
    st.write(t("snail_desc", lang))

    upload = st.file_uploader(
        t("snap", lang),
        type=["png", "jpg", "jpeg", "webp"],
        disabled=wizard.classification_pending,
    )
    if upload is not None:
        st.image(upload, use_container_width=True)
        upload_key = f"{upload.name}:{upload.size}"
        if st.session_state.get("snail_upload_key") != upload_key:
            st.session_state["snail_upload_key"] = upload_key
            with st.spinner(t("analyzing", lang)):
                wizard.classify_snail(upload.getvalue(), upload.type or "image/jpeg")

    if wizard.snail_analysis:
        st.info(wizard.snail_analysis)
        if wizard.snail_analysis == FALLBACK_ANALYSIS and st.button(t("try_again", lang)):
            st.session_state.pop("snail_upload_key", None)
            st.rerun()

    _nav(wizard, lang, next_label="calc")


def step_result(wizard: RiskAssessmentWizard, lang: str) -> None:
    result = wizard.result()
    tier = risk_tier(result.score)
    color = _TIER_COLORS[tier]

    st.plotly_chart(_score_gauge(result.score, color), use_container_width=True)
    st.markdown(f"<h3 style='text-align:center;color:{color};'>{tier_label(tier, lang)}</h3>", unsafe_allow_html=True)

    st.markdown(f"**{t('factors', lang)}**")
    if result.reasons:
        for reason in result.reasons:
            st.markdown(f"- {reason}")
    else:
        st.success(t("no_factors", lang))

    st.caption(t("disclaimer", lang))

    if st.button(t("start_over", lang)):
        wizard.start_over()
        st.session_state.pop("snail_upload_key", None)
        st.rerun()


_STEP_VIEWS = {
    Step.INTRO: step_intro,
    Step.GEO: step_geo,
    Step.BEHAVIOR: step_behavior,
    Step.CLINICAL: step_clinical,
    Step.SNAIL: step_snail,
    Step.RESULT: step_result,
}


def page_risk():
    lang = _language()
    wizard = _wizard()

    st.title(t("title", lang))
    if wizard.step not in (Step.INTRO, Step.RESULT):
        index, total = wizard.progress()
        st.caption(t("step_of", lang).format(index=index, total=total))
        st.progress(index / total)

    _STEP_VIEWS[wizard.step](wizard, lang)


# -----------------------------
# Assistant
# -----------------------------
def _messages() -> List[ChatMessage]:
    if "chat_messages" not in st.session_state:
        st.session_state["chat_messages"] = [assistant.greeting(_language())]
        st.session_state["chat_session_id"] = None
    return st.session_state["chat_messages"]


def _new_chat() -> None:
    st.session_state["chat_messages"] = [assistant.greeting(_language())]
    st.session_state["chat_session_id"] = None


def _send(messages: List[ChatMessage], user_message: ChatMessage) -> None:
    profile = _profile()
    if not profile_store.can_send_prompt(profile):
        messages.append(ChatMessage(
            sender=assistant.BOT,
            text=assistant.LIMIT_REPLY.format(limit=profile_store.FREE_PROMPT_LIMIT),
        ))
        st.session_state["show_upgrade"] = True
        return

    messages.append(user_message)
    with st.spinner(t("thinking", _language())):
        try:
            messages.append(assistant.reply(messages, _language()))
        except Exception as e:
            logger.error(f"Assistant reply failed: {e}")
            messages.append(ChatMessage(sender=assistant.BOT, text=assistant.ERROR_REPLY))
            return

    st.session_state["profile"] = profile_store.record_prompt(profile)

    if len(messages) > 2:
        session = chat_history.save_session(profile["id"], messages, st.session_state.get("chat_session_id"))
        st.session_state["chat_session_id"] = session.id


def page_assistant():
    lang = _language()
    st.title(t("assistant_title", lang))
    profile = _profile()
    if not profile:
        st.info(t("sign_in_to_chat", lang))
        return

    messages = _messages()

    with st.sidebar:
        st.markdown(f"### {t('conversations', lang)}")
        if st.button(t("new_chat", lang), use_container_width=True):
            _new_chat()
            st.rerun()
        for session in chat_history.load_history(profile["id"]):
            c1, c2 = st.columns([4, 1])
            with c1:
                if st.button(session.title, key=f"load_{session.id}", use_container_width=True):
                    st.session_state["chat_messages"] = session.messages
                    st.session_state["chat_session_id"] = session.id
                    st.rerun()
            with c2:
                if st.button("x", key=f"del_{session.id}"):
                    chat_history.delete_session(profile["id"], session.id)
                    if st.session_state.get("chat_session_id") == session.id:
                        _new_chat()
                    st.rerun()

    remaining = profile_store.remaining_prompts(profile)
    if remaining is not None:
        st.caption(t("prompts_left", lang).format(count=remaining))

    pending: Optional[ChatMessage] = None
    for i, msg in enumerate(messages):
        with st.chat_message("user" if msg.sender == assistant.USER else "assistant"):
            st.markdown(msg.text)
            if msg.sender == assistant.BOT and msg.suggestions and i == len(messages) - 1:
                for j, suggestion in enumerate(msg.suggestions):
                    if st.button(suggestion, key=f"sugg_{i}_{j}"):
                        pending = ChatMessage(sender=assistant.USER, text=suggestion)

    upload = st.file_uploader(
        t("attach", lang),
        type=["png", "jpg", "jpeg", "webp", "txt", "md"],
        help=t("attach_help", lang),
    )
    if upload is not None and st.session_state.get("chat_upload_key") != f"{upload.name}:{upload.size}":
        st.session_state["chat_upload_key"] = f"{upload.name}:{upload.size}"
        pending = assistant.attachment_message(upload.name, upload.type or "text/plain", upload.getvalue(), lang)

    typed = st.chat_input(t("ask_placeholder", lang))
    if typed and typed.strip():
        pending = ChatMessage(sender=assistant.USER, text=typed.strip())

    if pending is not None:
        _send(messages, pending)
        st.rerun()

    if st.session_state.pop("show_upgrade", False):
        st.warning(t("upgrade_hint", lang))


# -----------------------------
# Account
# -----------------------------
def page_account():
    lang = _language()
    st.title(t("account_title", lang))
    profile = _profile()

    if not profile:
        email = st.text_input(t("email", lang), value="", placeholder="you@example.com")
        if st.button(t("continue", lang), type="primary") and email.strip():
            user_id = profile_store.profile_id_for_email(email)
            st.session_state["profile"] = profile_store.get_or_create_profile(user_id, email.strip())
            st.rerun()
        return

    _refresh_profile()
    profile = _profile()

    c1, c2 = st.columns(2)
    c1.metric(t("plan", lang), t("premium", lang) if profile["is_premium"] else t("free_trial", lang))
    c2.metric(t("prompts_used", lang), f"{profile['prompt_count']}/{profile_store.FREE_PROMPT_LIMIT}" if not profile["is_premium"] else profile["prompt_count"])

    if not profile["is_premium"]:
        st.progress(min(profile["prompt_count"] / profile_store.FREE_PROMPT_LIMIT, 1.0))
        st.markdown(f"#### {t('choose_plan', lang)}")
        b1, b2 = st.columns(2)
        for col, plan in zip((b1, b2), profile_store.PLANS):
            with col:
                if st.button(t("upgrade_plan", lang).format(plan=plan), use_container_width=True):
                    st.session_state["profile"] = profile_store.upgrade(profile["id"], plan) or profile
                    st.rerun()
    else:
        st.caption(t("subscription", lang).format(plan=profile.get("subscription_plan") or "-"))

    sessions = chat_history.load_history(profile["id"])
    if sessions:
        st.markdown(f"#### {t('saved_conversations', lang)}")
        df = pd.DataFrame([
            {
                "title": s.title,
                "messages": len(s.messages),
                "updated": datetime.fromtimestamp(s.date).strftime("%Y-%m-%d %H:%M"),
            }
            for s in sessions
        ])
        st.dataframe(df, use_container_width=True, hide_index=True)

    if st.button(t("sign_out", lang)):
        for key in ("profile", "chat_messages", "chat_session_id"):
            st.session_state.pop(key, None)
        st.rerun()


# -----------------------------
# Navigation
# -----------------------------
_PAGES = {
    "page_risk": page_risk,
    "page_assistant": page_assistant,
    "page_account": page_account,
}

st.sidebar.markdown("## Schisto-Care")
st.sidebar.caption("AI Guidance & Prevention")
st.session_state["language"] = st.sidebar.selectbox(
    t("language", _language()),
    list(LANGUAGES),
    index=list(LANGUAGES).index(_language()),
    format_func=lambda code: LANGUAGES[code],
)

page = st.sidebar.radio(
    t("navigate", _language()),
    list(_PAGES),
    index=0,
    format_func=lambda key: t(key, _language()),
)
_PAGES[page]()
