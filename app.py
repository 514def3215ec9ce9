"""Streamlit UI for the Inkaranya experiential-learning job board."""
from __future__ import annotations

from datetime import date, time

import streamlit as st

from inkaranya.api import ApiClient
from inkaranya.config import load_settings
from inkaranya.dashboards import EmployeeDashboard, OrganizationDashboard
from inkaranya.feed import (
    ALL,
    OpportunityFeed,
    compensation_display,
    load_opportunity,
    load_organization,
    location_display,
    opportunity_card_html,
)
from inkaranya.guards import (
    EMPLOYEE_DASHBOARD,
    HOME,
    LOGIN,
    ORGANIZATION_DASHBOARD,
    public_only,
    require_auth,
    require_role,
)
from inkaranya.interview import InterviewDetails
from inkaranya.log import get_logger
from inkaranya.models import Application
from inkaranya.notify import ERROR, SUCCESS, Notifier
from inkaranya.opportunities import OpportunityForm, delete_opportunity, save_opportunity
from inkaranya.recommendations import (
    RecommendationFeed,
    SkillsAndInterests,
    compensation_badge,
    score_color,
    score_label,
)
from inkaranya.review import ReviewDesk, employee_applications, employee_interviews, withdraw
from inkaranya.session import EMPLOYEE, ORGANIZATION, AuthSession, registration_payload
from inkaranya.status import (
    ACTION_LABELS,
    ApplicationStatus,
    ReviewAction,
    available_actions,
    status_color,
    status_label,
)
from inkaranya.validation import ValidationError
from inkaranya.wizard import (
    AddEntry,
    ApplicationWizard,
    AttachDocument,
    RemoveEntry,
    Section,
    SetCoverLetter,
    SetField,
    WizardStep,
)

log = get_logger(__name__)

SETTINGS = load_settings()

_CSS = """
<style>
.opp-card {
    padding: 0.9rem 1.1rem; margin-bottom: 0.6rem;
    background: rgba(255,255,255,0.65);
    border: 1px solid rgba(74,144,217,0.25); border-radius: 12px;
    box-shadow: 0 4px 16px rgba(0,0,0,0.05);
}
.opp-card h4 { margin: 0 0 0.25rem 0; color: #1a1a2e; }
.opp-meta { color: #666; font-size: 0.85rem; }
</style>
"""

# ── Session objects ──────────────────────────────────────────────────────


def _notifier() -> Notifier:
    if "notifier" not in st.session_state:
        st.session_state["notifier"] = Notifier()
    return st.session_state["notifier"]


def _api() -> ApiClient:
    if "api" not in st.session_state:
        st.session_state["api"] = ApiClient()
    return st.session_state["api"]


def _auth() -> AuthSession:
    if "auth" not in st.session_state:
        auth = AuthSession(_api())
        with st.spinner("Checking your session…"):
            auth.init()
        st.session_state["auth"] = auth
    return st.session_state["auth"]


def _cached(key: str, factory):
    if key not in st.session_state:
        st.session_state[key] = factory()
    return st.session_state[key]


def _flush_notifications() -> None:
    for n in _notifier().drain():
        if n.variant == ERROR:
            st.error(f"**{n.title}**: {n.description}")
        elif n.variant == SUCCESS:
            st.toast(f"{n.title} {n.description}", icon="✅")
        else:
            st.toast(f"{n.title} {n.description}")


def _redirect(target: str | None) -> bool:
    if target is None:
        return False
    log.debug("Redirecting to %s", target)
    st.switch_page(PAGES[target])
    return True


def _choices(values: list[str]) -> list[str]:
    return [ALL] + list(values)


def _fmt_all(label_all: str):
    return lambda v: label_all if v == ALL else str(v).replace("-", " ").title()


# ── Shared widgets ───────────────────────────────────────────────────────


def _open_organization(organization_id: str) -> None:
    st.session_state["organization_id"] = organization_id
    st.switch_page(PAGES["organization"])


def _opportunity_card(opp, key_prefix: str) -> None:
    st.markdown(opportunity_card_html(opp), unsafe_allow_html=True)
    c1, c2 = st.columns(2)
    if c1.button("View details", key=f"{key_prefix}_{opp.id}"):
        st.session_state["opportunity_id"] = opp.id
        st.switch_page(PAGES["opportunity"])
    if opp.organization.id and c2.button("View organization", key=f"{key_prefix}_org_{opp.id}"):
        _open_organization(opp.organization.id)


def _status_badge(status: str) -> str:
    return f":{status_color(status)}[**{status_label(status)}**]"


def _applications_table(apps: list[Application]) -> None:
    if not apps:
        st.info("No applications yet.")
        return
    import pandas as pd

    df = pd.DataFrame(
        [
            {
                "opportunity": a.opportunity_title,
                "applicant": a.applicant_name,
                "status": status_label(a.status),
                "submitted": (a.submitted_at or "")[:10],
            }
            for a in apps
        ]
    )
    st.dataframe(df, use_container_width=True, hide_index=True)


# ── Page: Home (feed) ────────────────────────────────────────────────────


def page_home() -> None:
    st.header("Discover Opportunities")
    auth = _auth()
    if auth.is_authenticated:
        st.caption(f"Signed in as {(auth.user or {}).get('email', '')}")

    feed: OpportunityFeed = _cached(
        "feed", lambda: OpportunityFeed(_api(), _notifier())
    )
    if "feed_loaded" not in st.session_state:
        feed.refresh()
        st.session_state["feed_loaded"] = True

    f = feed.filters
    search = st.text_input("Search opportunities", value=f.search, placeholder="Title, skill, organization…")
    c1, c2, c3, c4, c5 = st.columns(5)
    with c1:
        opts = _choices(SETTINGS["opportunity_types"])
        type_ = st.selectbox("Type", opts, index=opts.index(f.type) if f.type in opts else 0,
                             format_func=_fmt_all("All Types"))
    with c2:
        opts = _choices(SETTINGS["categories"])
        category = st.selectbox("Category", opts, index=opts.index(f.category) if f.category in opts else 0,
                                format_func=_fmt_all("All Categories"))
    with c3:
        opts = _choices(SETTINGS["location_types"])
        location = st.selectbox("Location", opts, index=opts.index(f.location) if f.location in opts else 0,
                                format_func=_fmt_all("All Locations"))
    with c4:
        opts = _choices(SETTINGS["industries"])
        industry = st.selectbox("Industry", opts, index=opts.index(f.industry) if f.industry in opts else 0,
                                format_func=_fmt_all("All Industries"))
    with c5:
        sorts = SETTINGS["sort_options"]
        keys = list(sorts)
        sort_by = st.selectbox("Sort by", keys, index=keys.index(f.sort_by) if f.sort_by in keys else 0,
                               format_func=lambda k: sorts[k])

    # Search only runs on the button; filters and sort refetch immediately.
    feed.update_filters(type=type_, category=category, location=location,
                        industry=industry, sort_by=sort_by)

    b1, b2, _ = st.columns([1, 1, 4])
    if b1.button("Search", type="primary", use_container_width=True):
        feed.update_filters(search=search)
    if b2.button("Clear Filters", use_container_width=True):
        feed.clear_filters()
        st.rerun()

    _flush_notifications()
    st.divider()
    if not feed.opportunities:
        st.info("No opportunities match your filters.")
        return
    st.caption(f"{len(feed.opportunities)} opportunities")
    for opp in feed.opportunities:
        _opportunity_card(opp, "feed")


# ── Page: Login / Register ───────────────────────────────────────────────


def page_login() -> None:
    auth = _auth()
    if _redirect(public_only(auth)):
        return
    st.header("Welcome to Inkaranya")

    tab_login, tab_register = st.tabs(["Login", "Register"])

    with tab_login:
        with st.form("login"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign In", type="primary", use_container_width=True)
        if submitted:
            result = auth.login(email, password)
            if result["success"]:
                _redirect(public_only(auth))
                return
            st.error(result["error"])

    with tab_register:
        role = st.radio("I am", [EMPLOYEE, ORGANIZATION], horizontal=True,
                        format_func=lambda r: "a student / employee" if r == EMPLOYEE else "an organization")
        with st.form("register"):
            form: dict[str, str] = {"role": role}
            form["email"] = st.text_input("Email", key="reg_email")
            if role == EMPLOYEE:
                c1, c2 = st.columns(2)
                form["firstName"] = c1.text_input("First name")
                form["lastName"] = c2.text_input("Last name")
                form["phone"] = st.text_input("Phone")
            else:
                form["name"] = st.text_input("Organization name")
                form["description"] = st.text_area("Description", height=80)
                c1, c2 = st.columns(2)
                form["industry"] = c1.selectbox("Industry", SETTINGS["industries"])
                form["size"] = c2.selectbox("Size", ["1-10", "11-50", "51-200", "201-500", "500+"])
            c1, c2 = st.columns(2)
            form["password"] = c1.text_input("Password", type="password", key="reg_pw")
            form["confirmPassword"] = c2.text_input("Confirm password", type="password")
            submitted = st.form_submit_button("Create Account", type="primary", use_container_width=True)
        if submitted:
            try:
                payload = registration_payload(form)
            except ValidationError as exc:
                for message in exc.errors:
                    st.error(message)
            else:
                result = auth.register(payload)
                if result["success"]:
                    _redirect(public_only(auth))
                    return
                st.error(result["error"])


# ── Page: Opportunity detail + application wizard ────────────────────────


def _wizard_key() -> str:
    return f"wizard_{st.session_state.get('opportunity_id')}"


def _bump_rev() -> None:
    st.session_state["wz_rev"] = st.session_state.get("wz_rev", 0) + 1


def _field(wizard: ApplicationWizard, section: Section, name: str, label: str,
           index: int | None = None, kind: str = "text", options: list[str] | None = None) -> None:
    current = getattr(wizard.record(section, index), name)
    key = f"wz{st.session_state.get('wz_rev', 0)}_{section.value}_{index}_{name}"
    if kind == "area":
        value = st.text_area(label, value=current, key=key)
    elif kind == "check":
        value = st.checkbox(label, value=bool(current), key=key)
    elif kind == "number":
        value = int(st.number_input(label, 1, 80, value=int(current or 1), key=key))
    elif kind == "select":
        opts = options or []
        value = st.selectbox(label, opts, index=opts.index(current) if current in opts else 0, key=key)
    else:
        value = st.text_input(label, value=current or "", key=key)
    if value != current:
        wizard.dispatch(SetField(section, name, value, index))


def _entries(wizard: ApplicationWizard, section: Section, noun: str, layout) -> None:
    for i in range(wizard.entry_count(section)):
        with st.container(border=True):
            head, remove = st.columns([5, 1])
            head.markdown(f"**{noun} #{i + 1}**")
            if wizard.can_remove(section) and remove.button("Remove", key=f"rm_{section.value}_{i}"):
                wizard.dispatch(RemoveEntry(section, i))
                _bump_rev()
                st.rerun()
            layout(i)
    if st.button(f"Add {noun}"):
        wizard.dispatch(AddEntry(section))
        _bump_rev()
        st.rerun()


def _render_step(wizard: ApplicationWizard) -> None:
    step = wizard.step
    if step == WizardStep.PERSONAL_INFO:
        s = Section.PERSONAL_INFO
        c1, c2 = st.columns(2)
        with c1:
            _field(wizard, s, "first_name", "First Name *")
            _field(wizard, s, "email", "Email *")
            _field(wizard, s, "address", "Address *")
            _field(wizard, s, "state", "State *")
            _field(wizard, s, "date_of_birth", "Date of Birth * (YYYY-MM-DD)")
        with c2:
            _field(wizard, s, "last_name", "Last Name *")
            _field(wizard, s, "phone", "Phone *")
            _field(wizard, s, "city", "City *")
            _field(wizard, s, "country", "Country *")

    elif step == WizardStep.EDUCATION:
        def education(i: int) -> None:
            s = Section.EDUCATION
            c1, c2 = st.columns(2)
            with c1:
                _field(wizard, s, "institution", "Institution *", i)
                _field(wizard, s, "field_of_study", "Field of Study *", i)
                _field(wizard, s, "start_date", "Start Date *", i)
            with c2:
                _field(wizard, s, "degree", "Degree *", i)
                _field(wizard, s, "gpa", "GPA (Optional)", i)
                _field(wizard, s, "end_date", "End Date *", i)
            _field(wizard, s, "is_current", "Currently studying here", i, kind="check")

        _entries(wizard, Section.EDUCATION, "Education", education)

    elif step == WizardStep.EXPERIENCE:
        def experience(i: int) -> None:
            s = Section.EXPERIENCE
            c1, c2 = st.columns(2)
            with c1:
                _field(wizard, s, "title", "Job Title *", i)
                _field(wizard, s, "location", "Location", i)
                _field(wizard, s, "start_date", "Start Date *", i)
            with c2:
                _field(wizard, s, "company", "Company *", i)
                _field(wizard, s, "is_current", "Currently working here", i, kind="check")
                _field(wizard, s, "end_date", "End Date *", i)
            _field(wizard, s, "description", "Description", i, kind="area")

        _entries(wizard, Section.EXPERIENCE, "Experience", experience)

    elif step == WizardStep.DOCUMENTS:
        resume = st.file_uploader("Resume", type=["pdf", "doc", "docx"])
        if resume is not None and resume.name != wizard.data.documents.resume:
            wizard.dispatch(AttachDocument("resume", resume.name))
        letter = st.file_uploader("Cover Letter (Optional)", type=["pdf", "doc", "docx"])
        if letter is not None and letter.name != wizard.data.documents.cover_letter_file:
            wizard.dispatch(AttachDocument("cover_letter_file", letter.name))
        s = Section.DOCUMENTS
        _field(wizard, s, "linkedin", "LinkedIn Profile")
        _field(wizard, s, "github", "GitHub Profile")
        _field(wizard, s, "portfolio", "Portfolio/Website")

    elif step == WizardStep.COVER_LETTER:
        letter = st.text_area("Cover Letter *", value=wizard.data.cover_letter, height=200,
                              key=f"wz{st.session_state.get('wz_rev', 0)}_cover")
        if letter != wizard.data.cover_letter:
            wizard.dispatch(SetCoverLetter(letter))
        s = Section.ADDITIONAL_INFO
        _field(wizard, s, "why_interested", "Why are you interested in this opportunity? *", kind="area")
        _field(wizard, s, "relevant_experience", "Relevant Experience", kind="area")
        _field(wizard, s, "questions", "Questions for the Company", kind="area")

    else:
        s = Section.AVAILABILITY
        c1, c2, c3 = st.columns(3)
        with c1:
            _field(wizard, s, "start_date", "Available Start Date *")
        with c2:
            _field(wizard, s, "hours_per_week", "Hours per Week *", kind="number")
        with c3:
            _field(wizard, s, "work_mode", "Preferred Work Mode *", kind="select",
                   options=SETTINGS["work_modes"])
        st.subheader("Summary")
        info = wizard.data.personal_info
        st.markdown(
            f"**Name:** {info.first_name} {info.last_name}  \n"
            f"**Email:** {info.email}  \n"
            f"**Education entries:** {len(wizard.data.education)}  \n"
            f"**Experience entries:** {len(wizard.data.experience)}  \n"
            f"**Resume:** {wizard.data.documents.resume or 'not attached'}"
        )


def _application_wizard(opp) -> None:
    auth = _auth()
    wizard: ApplicationWizard = _cached(
        _wizard_key(),
        lambda: ApplicationWizard(_api(), _notifier(), opp.id, opp.title,
                                  user=auth.user, profile=auth.profile),
    )
    if not wizard.is_open:
        st.success("Your application has been submitted.")
        return

    st.subheader(f"Apply for {opp.title}")
    st.markdown(f"**{wizard.title}**")
    st.progress(wizard.progress / 100, text=f"Step {int(wizard.step)} of {wizard.TOTAL_STEPS} · {wizard.progress}% Complete")
    _render_step(wizard)

    c1, _, c2 = st.columns([1, 3, 1])
    if c1.button("Previous", disabled=wizard.step == WizardStep.PERSONAL_INFO, use_container_width=True):
        wizard.prev()
        st.rerun()
    if wizard.is_last_step:
        if c2.button("Submit Application", type="primary", use_container_width=True,
                     disabled=wizard.loading):
            if wizard.submit():
                st.session_state.pop("show_wizard", None)
            st.rerun()
    elif c2.button("Next", type="primary", use_container_width=True):
        wizard.next()
        st.rerun()


def page_opportunity() -> None:
    opp_id = st.session_state.get("opportunity_id")
    if not opp_id:
        st.info("Pick an opportunity from the feed first.")
        return
    opp = _cached(f"opp_{opp_id}", lambda: load_opportunity(_api(), opp_id, _notifier()))
    _flush_notifications()
    if opp is None:
        st.session_state.pop(f"opp_{opp_id}", None)
        return

    st.header(opp.title)
    org = opp.organization
    st.caption(f"{org.name} · {org.industry or 'Industry n/a'} · {org.size or 'size n/a'}")
    if org.id and st.button("View organization", key=f"opp_org_{org.id}"):
        _open_organization(org.id)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Type", (opp.type or "n/a").title())
    c2.metric("Category", (opp.category or "n/a").title())
    c3.metric("Location", location_display(opp))
    c4.metric("Compensation", compensation_display(opp))
    if opp.deadline:
        st.info(f"Application deadline: {str(opp.deadline)[:10]}")
    st.markdown(opp.description or "_No description provided._")

    requirements = opp.raw.get("requirements") or {}
    skills = [s.get("name") for s in requirements.get("skills") or [] if isinstance(s, dict)]
    if skills:
        st.markdown("**Skills:** " + ", ".join(skills))
    benefits = opp.raw.get("benefits") or (opp.raw.get("compensation") or {}).get("benefits") or []
    if benefits:
        st.markdown("**Benefits:** " + ", ".join(str(b) for b in benefits))

    auth = _auth()
    st.divider()
    if auth.is_employee:
        if st.session_state.get("show_wizard") or st.button("Apply Now", type="primary"):
            st.session_state["show_wizard"] = True
            _application_wizard(opp)
    elif not auth.is_authenticated:
        st.info("Sign in as an employee to apply.")
        if st.button("Sign in to apply", type="primary"):
            _redirect(require_auth(auth))


# ── Page: Organization profile ───────────────────────────────────────────


def page_organization() -> None:
    org_id = st.session_state.get("organization_id")
    if not org_id:
        st.info("Pick an organization from an opportunity first.")
        return
    loaded = _cached(f"org_{org_id}", lambda: load_organization(_api(), org_id, _notifier()))
    _flush_notifications()
    if loaded is None:
        st.session_state.pop(f"org_{org_id}", None)
        return
    org, opportunities = loaded

    logo = (org.get("logo") or {}).get("url")
    if logo:
        st.image(logo, width=96)
    st.header(org.get("name") or "Organization")
    location = org.get("location") or {}
    where = ", ".join(p for p in (location.get("city"), location.get("state")) if p)
    st.caption(" · ".join(p for p in (org.get("industry"), where, org.get("size")) if p))
    if org.get("website"):
        st.link_button("Website", org["website"])

    st.markdown(org.get("description") or "_No description provided._")
    if org.get("mission"):
        st.subheader("Mission")
        st.markdown(org["mission"])
    for title, key in (("Values", "values"), ("Benefits", "benefits")):
        items = [str(v) for v in org.get(key) or []]
        if items:
            st.subheader(title)
            st.markdown("\n".join(f"- {v}" for v in items))

    st.divider()
    st.subheader(f"Open opportunities ({len(opportunities)})")
    if not opportunities:
        st.info("No open opportunities right now.")
    for opp in opportunities:
        _opportunity_card(opp, key_prefix="org_opp")


# ── Page: Employee dashboard ─────────────────────────────────────────────


def page_employee_dashboard() -> None:
    auth = _auth()
    if _redirect(require_role(auth, EMPLOYEE)):
        return
    dash: EmployeeDashboard = _cached(
        "employee_dash", lambda: EmployeeDashboard(_api(), _notifier())
    )
    if dash.data is None:
        with st.spinner("Loading dashboard…"):
            dash.load()

    first = ((auth.profile or {}).get("personalInfo") or {}).get("firstName") or "Employee"
    st.header(f"Welcome back, {first}!")
    st.caption("Discover opportunities and track your applications")
    _flush_notifications()

    stats = dash.stats
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Applications", stats.get("totalApplications", 0))
    c2.metric("Pending", stats.get("pendingApplications", 0))
    c3.metric("Accepted", stats.get("acceptedApplications", 0))
    c4.metric("Profile", f"{stats.get('profileCompleteness', 0)}%")

    tab_overview, tab_apps, tab_recs, tab_interviews, tab_profile = st.tabs(
        ["Overview", "Applications", "Recommendations", "Interviews", "Skills & Interests"]
    )

    with tab_overview:
        st.subheader("Recent Applications")
        _applications_table(dash.recent_applications)
        if dash.recommended:
            st.subheader("Recommended for you")
            for opp in dash.recommended[:5]:
                _opportunity_card(opp, "dash_rec")

    with tab_apps:
        apps = employee_applications(_api(), _notifier())
        _flush_notifications()
        if not apps:
            st.info("You haven't applied to anything yet.")
        for app in apps:
            with st.container(border=True):
                c1, c2 = st.columns([4, 1])
                c1.markdown(f"**{app.opportunity_title or 'Opportunity'}** · {_status_badge(app.status)}")
                if ReviewAction.WITHDRAW in available_actions(app.status, EMPLOYEE):
                    if c2.button("Withdraw", key=f"wd_{app.id}"):
                        withdraw(_api(), _notifier(), app)
                        st.rerun()

    with tab_recs:
        recs: RecommendationFeed = _cached(
            "rec_feed", lambda: RecommendationFeed(_api(), _notifier())
        )
        if "rec_loaded" not in st.session_state:
            recs.refresh()
            st.session_state["rec_loaded"] = True
        c1, c2, c3 = st.columns(3)
        for col, name, values in (
            (c1, "type", SETTINGS["opportunity_types"]),
            (c2, "category", SETTINGS["categories"]),
            (c3, "location", SETTINGS["location_types"]),
        ):
            opts = _choices(values)
            current = recs.filters[name]
            picked = col.selectbox(name.title(), opts, index=opts.index(current) if current in opts else 0,
                                   format_func=_fmt_all("All"), key=f"rec_{name}")
            recs.set_filter(name, picked)
        _flush_notifications()
        for rec in recs.recommendations:
            overall = rec.scores.overall
            with st.container(border=True):
                st.markdown(f"**{rec.opportunity.title}**: {rec.opportunity.organization.name}")
                badge = compensation_badge(rec)
                st.markdown(
                    f":{score_color(overall)}[**{overall:.0f}% · {score_label(overall)}**]"
                    + (f"  :green-background[💰 {badge}]" if badge else "")
                )
                m1, m2, m3 = st.columns(3)
                m1.progress(min(rec.scores.skills, 100) / 100, text=f"Skills {rec.scores.skills:.0f}%")
                m2.progress(min(rec.scores.interests, 100) / 100, text=f"Interests {rec.scores.interests:.0f}%")
                m3.progress(min(rec.scores.location, 100) / 100, text=f"Location {rec.scores.location:.0f}%")
                for reason in rec.match_reasons:
                    st.caption(f"• {reason}")

    with tab_interviews:
        interviews = employee_interviews(_api(), _notifier())
        _flush_notifications()
        if not interviews:
            st.info("No interviews scheduled yet.")
        for app, details in interviews:
            with st.expander(f"📅 {details.date} {details.time}: {app.opportunity_title}", expanded=True):
                st.markdown(
                    f"**Type:** {details.type}  \n"
                    f"**Duration:** {details.duration} minutes  \n"
                    f"**Interviewer:** {details.interviewer} {f'({details.interviewer_email})' if details.interviewer_email else ''}"
                )
                if details.meeting_link:
                    st.link_button("Join meeting", details.meeting_link)
                if details.location:
                    st.markdown(f"**Location:** {details.location}")
                if details.notes:
                    st.caption(details.notes)

    with tab_profile:
        form: SkillsAndInterests = _cached(
            "skills_form", lambda: SkillsAndInterests.from_profile(auth.profile)
        )
        st.subheader("Skills")
        for i, skill in enumerate(form.skills):
            c1, c2 = st.columns([5, 1])
            c1.markdown(f"{skill.name} · {skill.level} · {skill.category} · {skill.years_of_experience}y")
            if c2.button("Remove", key=f"rm_skill_{i}"):
                form.remove_skill(i)
                st.rerun()
        with st.form("add_skill", clear_on_submit=True):
            c1, c2, c3, c4 = st.columns(4)
            name = c1.text_input("Skill")
            level = c2.selectbox("Level", SETTINGS["skill_levels"])
            category = c3.selectbox("Category", SETTINGS["skill_categories"])
            years = c4.number_input("Years", 0, 50, 0)
            if st.form_submit_button("Add skill"):
                form.add_skill(name, level, category, int(years))
                st.rerun()

        st.subheader("Interests")
        for i, interest in enumerate(form.interests):
            c1, c2 = st.columns([5, 1])
            c1.markdown(f"{interest.name} · {interest.category} · {interest.level}")
            if c2.button("Remove", key=f"rm_interest_{i}"):
                form.remove_interest(i)
                st.rerun()
        with st.form("add_interest", clear_on_submit=True):
            c1, c2, c3 = st.columns(3)
            name = c1.text_input("Interest")
            category = c2.selectbox("Category", SETTINGS["interest_categories"])
            level = c3.selectbox("Level", SETTINGS["interest_levels"])
            if st.form_submit_button("Add interest"):
                form.add_interest(name, category, level)
                st.rerun()

        if st.button("Save Skills & Interests", type="primary"):
            if form.save(_api(), _notifier()):
                st.session_state.pop("rec_loaded", None)
            st.rerun()


# ── Page: Organization dashboard ─────────────────────────────────────────


def _schedule_form(desk: ReviewDesk, app: Application) -> None:
    with st.form(f"schedule_{app.id}"):
        st.markdown(f"Schedule interview for **{app.applicant_name}**: {app.opportunity_title}")
        c1, c2, c3 = st.columns(3)
        day = c1.date_input("Date *", min_value=date.today())
        at = c2.time_input("Time *", value=time(10, 0))
        duration = c3.selectbox("Duration (minutes)", [30, 45, 60, 90, 120], index=2)
        kind = st.selectbox("Interview type", SETTINGS["interview_types"])
        place = st.text_input("Location (in-person) or meeting link (video/phone)")
        c1, c2 = st.columns(2)
        interviewer = c1.text_input("Interviewer name *")
        interviewer_email = c2.text_input("Interviewer email")
        notes = st.text_area("Notes", height=80)
        if st.form_submit_button("Schedule Interview", type="primary"):
            details = InterviewDetails(
                date=day.isoformat() if day else "",
                time=at.strftime("%H:%M") if at else "",
                duration=int(duration),
                type=kind,
                location=place if kind == "in-person" else "",
                meeting_link=place if kind != "in-person" else "",
                interviewer=interviewer,
                interviewer_email=interviewer_email,
                notes=notes,
            )
            if desk.schedule_interview(app, details):
                st.session_state.pop("scheduling", None)
            st.rerun()


def _applications_management() -> None:
    desk: ReviewDesk = _cached("review_desk", lambda: ReviewDesk(_api(), _notifier()))
    if "desk_loaded" not in st.session_state:
        desk.refresh()
        st.session_state["desk_loaded"] = True

    c1, c2 = st.columns([3, 1])
    statuses = [ALL] + [s.value for s in ApplicationStatus if s != ApplicationStatus.WITHDRAWN]
    picked = c1.selectbox("Status", statuses, index=statuses.index(desk.status_filter),
                          format_func=lambda v: "All Status" if v == ALL else status_label(v))
    desk.set_status_filter(picked)
    if c2.button("Refresh", use_container_width=True):
        desk.refresh()
    _flush_notifications()

    if not desk.applications:
        st.info("No applications found.")
        return
    for app in desk.applications:
        with st.expander(f"{app.applicant_name or 'Applicant'}: {app.opportunity_title}"):
            st.markdown(f"{_status_badge(app.status)} · submitted {(app.submitted_at or '')[:10]}")
            if app.applicant_email:
                st.caption(app.applicant_email)
            raw = app.raw
            for edu in raw.get("education") or []:
                st.markdown(f"🎓 {edu.get('degree', '')} in {edu.get('fieldOfStudy', '')}, {edu.get('institution', '')}")
            for exp in raw.get("experience") or []:
                st.markdown(f"💼 {exp.get('title', '')} at {exp.get('company', '')}")
            if app.cover_letter:
                st.markdown("**Cover letter**")
                st.write(app.cover_letter)
            docs = raw.get("documents") or {}
            for label, link in (("LinkedIn", docs.get("linkedin")), ("GitHub", docs.get("github"))):
                if link:
                    st.link_button(label, link)

            actions = available_actions(app.status, ORGANIZATION)
            if not actions:
                st.caption("No further actions: this application is closed.")
            cols = st.columns(max(len(actions), 1))
            for col, action in zip(cols, actions):
                if not col.button(ACTION_LABELS[action], key=f"{action.value}_{app.id}"):
                    continue
                if action == ReviewAction.SCHEDULE_INTERVIEW:
                    st.session_state["scheduling"] = app.id
                else:
                    desk.apply(app, action)
                st.rerun()
            if st.session_state.get("scheduling") == app.id:
                _schedule_form(desk, app)


def _create_opportunity() -> None:
    form: OpportunityForm = _cached("opp_form", OpportunityForm)
    with st.form("create_opportunity"):
        form.title = st.text_input("Title *", value=form.title)
        form.description = st.text_area("Description *", value=form.description)
        c1, c2 = st.columns(2)
        types = [""] + SETTINGS["opportunity_types"]
        form.type = c1.selectbox("Type *", types, index=types.index(form.type) if form.type in types else 0)
        cats = [""] + SETTINGS["categories"]
        form.category = c2.selectbox("Category *", cats, index=cats.index(form.category) if form.category in cats else 0)
        form.location = c1.text_input("Location (city, 'Remote' or 'Hybrid')", value=form.location)
        form.duration = c2.text_input("Duration", value=form.duration)
        form.start_date = c1.text_input("Start date * (YYYY-MM-DD)", value=form.start_date)
        form.end_date = c2.text_input("End date (YYYY-MM-DD)", value=form.end_date)
        form.application_deadline = c1.text_input("Application deadline", value=form.application_deadline)
        form.is_paid = c2.checkbox("Paid opportunity", value=form.is_paid)
        form.requirements = st.text_area("Requirements", value=form.requirements)
        form.benefits = st.text_input("Benefits", value=form.benefits)
        skills_text = st.text_input("Skills (comma separated)", value=", ".join(form.skills))
        submitted = st.form_submit_button("Create Opportunity", type="primary")
    if submitted:
        form.skills = []
        for skill in skills_text.split(","):
            form.add_skill(skill)
        if save_opportunity(_api(), _notifier(), form) is not None:
            st.session_state.pop("opp_form", None)
            st.session_state.pop("org_dash", None)
        st.rerun()


def page_organization_dashboard() -> None:
    auth = _auth()
    if _redirect(require_role(auth, ORGANIZATION)):
        return
    dash: OrganizationDashboard = _cached(
        "org_dash", lambda: OrganizationDashboard(_api(), _notifier())
    )
    if dash.data is None:
        with st.spinner("Loading dashboard…"):
            dash.load()

    org_name = (dash.organization or auth.profile or {}).get("name") or "Organization"
    st.header(f"{org_name} Dashboard")
    _flush_notifications()
    if dash.needs_profile:
        st.warning("Complete your organization profile to start posting opportunities.")

    stats = dash.stats
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Opportunities", stats.get("totalOpportunities", 0))
    c2.metric("Active", stats.get("activeOpportunities", 0))
    c3.metric("Applications", stats.get("totalApplications", 0))
    c4.metric("Pending", stats.get("pendingApplications", 0))

    tab_overview, tab_opps, tab_apps, tab_new = st.tabs(
        ["Overview", "Opportunities", "Applications", "Post Opportunity"]
    )

    with tab_overview:
        st.subheader("Recent Applications")
        recent = dash.recent_applications
        _applications_table(recent)
        desk: ReviewDesk = _cached("review_desk", lambda: ReviewDesk(_api(), _notifier()))
        for app in recent[:5]:
            quick = [a for a in available_actions(app.status, ORGANIZATION)
                     if a in (ReviewAction.SHORTLIST, ReviewAction.REJECT)]
            if not quick:
                continue
            cols = st.columns([4] + [1] * len(quick))
            cols[0].markdown(f"{app.applicant_name}: {app.opportunity_title}")
            for col, action in zip(cols[1:], quick):
                if col.button(ACTION_LABELS[action], key=f"quick_{action.value}_{app.id}"):
                    if desk.apply(app, action):
                        st.session_state.pop("org_dash", None)
                    st.rerun()

    with tab_opps:
        if not dash.opportunities:
            st.info("No opportunities posted yet.")
        for item in dash.opportunities:
            opp = item.get("opportunity", item)
            with st.container(border=True):
                c1, c2, c3 = st.columns([4, 1, 1])
                c1.markdown(f"**{opp.get('title', '')}** · {opp.get('status', '')}")
                c2.metric("Applicants", item.get("applicationCount", item.get("applications", 0)))
                if c3.button("Delete", key=f"del_{opp.get('_id')}"):
                    if delete_opportunity(_api(), _notifier(), opp.get("_id", "")):
                        st.session_state.pop("org_dash", None)
                    st.rerun()

    with tab_apps:
        _applications_management()

    with tab_new:
        _create_opportunity()


# ── Main ─────────────────────────────────────────────────────────────────


def _sidebar() -> None:
    auth = _auth()
    with st.sidebar:
        st.markdown("### Inkaranya")
        if auth.is_authenticated:
            user = auth.user or {}
            st.markdown(f"**{user.get('email', '')}**  \n{(auth.role or '').title()}")
            if st.button("Sign out", use_container_width=True):
                auth.logout()
                kept = {k: st.session_state[k] for k in ("api", "notifier", "auth")}
                for key in list(st.session_state.keys()):
                    del st.session_state[key]
                st.session_state.update(kept)
                st.rerun()
        else:
            st.caption("Not signed in")


def _wrap(page):
    def run() -> None:
        st.markdown(_CSS, unsafe_allow_html=True)
        _sidebar()
        page()
    run.__name__ = page.__name__
    return run


PAGES = {
    HOME: st.Page(_wrap(page_home), title="Home", icon="🏠", url_path="home", default=True),
    LOGIN: st.Page(_wrap(page_login), title="Sign in", icon="🔑", url_path="login"),
    "opportunity": st.Page(_wrap(page_opportunity), title="Opportunity", icon="📄", url_path="opportunity"),
    "organization": st.Page(_wrap(page_organization), title="Organization profile", icon="🏛️",
                            url_path="organization"),
    EMPLOYEE_DASHBOARD: st.Page(_wrap(page_employee_dashboard), title="My Dashboard", icon="🚀",
                                url_path="employee-dashboard"),
    ORGANIZATION_DASHBOARD: st.Page(_wrap(page_organization_dashboard), title="Organization", icon="🏢",
                                    url_path="organization-dashboard"),
}


def _nav_pages() -> list:
    """Every page stays registered so switch_page can reach it; guards gate access."""
    auth = _auth()
    if not auth.is_authenticated:
        order = [HOME, "opportunity", "organization", LOGIN, EMPLOYEE_DASHBOARD, ORGANIZATION_DASHBOARD]
    elif auth.is_organization:
        order = [ORGANIZATION_DASHBOARD, HOME, "opportunity", "organization", EMPLOYEE_DASHBOARD, LOGIN]
    else:
        order = [EMPLOYEE_DASHBOARD, HOME, "opportunity", "organization", ORGANIZATION_DASHBOARD, LOGIN]
    return [PAGES[name] for name in order]


nav = st.navigation(_nav_pages(), position="sidebar")
nav.run()
