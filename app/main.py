"""
Streamlit Frontend for Expensewise

The form that calls the categorization pipeline in-process.

DESIGN PRINCIPLES:
1. AI prefills, the user confirms
2. A failed categorization shows its message and leaves the form alone
3. Confidence is shown so the user knows how much to double-check

Expenses live in the session only; persistence belongs to whatever
data store the deployment plugs in.
"""

import asyncio
from datetime import date
from decimal import Decimal

import streamlit as st

from expensewise.audit import configure_logging, create_correlation_id
from expensewise.config import get_settings, validate_all_settings
from expensewise.models.expense import CategorizationFailure, Expense
from expensewise.models.taxonomy import CATEGORY_SUBCATEGORIES, EXPENSE_CATEGORIES
from expensewise.orchestrator import CategorizationFlow, create_app_components
from expensewise.queries import calculate_expense_summary, filter_expenses, sort_expenses


st.set_page_config(
    page_title="Expensewise",
    page_icon="💸",
    layout="wide",
    initial_sidebar_state="expanded",
)

CONFIDENCE_BADGES = {
    "high": "🟢 High confidence",
    "medium": "🟡 Medium confidence - please double-check",
    "low": "🔴 Low confidence - please review every field",
}

FORM_DEFAULTS = {
    "form_name": "",
    "form_category": EXPENSE_CATEGORIES[0],
    "form_subcategory": None,
    "form_brand_color": "",
    "form_brand_accent_color": "",
    "form_logo_url": "",
    "form_image_url": "",
    "form_confidence": None,
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_flow() -> CategorizationFlow:
    """Get or create the categorization flow (cached)."""
    configure_logging(get_settings().app.log_level)
    return create_app_components()


def init_session_state():
    if "expenses" not in st.session_state:
        st.session_state.expenses = []
    for key, value in FORM_DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = value


def main():
    """Main application entry point."""
    init_session_state()
    flow = get_flow()

    st.sidebar.title("💸 Expensewise")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["➕ Add Expense", "📊 Expenses", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Paste a purchase name or card memo
        2. Click *Auto-categorize*
        3. Review the prefilled details and save
        """
    )

    if page == "➕ Add Expense":
        render_add_page(flow)
    elif page == "📊 Expenses":
        render_expenses_page()
    elif page == "⚙️ Settings":
        render_settings_page()


def apply_categorization(flow: CategorizationFlow, raw_name: str):
    """Prefill the form from a categorization, or show its error."""
    with st.spinner("Asking the AI..."):
        outcome = run_async(
            flow.categorize(raw_name, correlation_id=create_correlation_id())
        )

    if isinstance(outcome, CategorizationFailure):
        # Form state is left untouched on failure
        st.error(outcome.error)
        return

    st.session_state.form_name = outcome.cleaned_name
    st.session_state.form_category = outcome.category
    st.session_state.form_subcategory = outcome.subcategory
    st.session_state.form_brand_color = outcome.brand_color or ""
    st.session_state.form_brand_accent_color = outcome.brand_accent_color or ""
    st.session_state.form_logo_url = outcome.logo_url
    st.session_state.form_image_url = outcome.image_url
    st.session_state.form_confidence = outcome.confidence.value
    st.rerun()


def render_add_page(flow: CategorizationFlow):
    """Render the add-expense form."""
    st.title("➕ Add Expense")

    raw_name = st.text_input(
        "What did you buy?",
        value=st.session_state.form_name,
        placeholder="e.g. AMZN*AB123CD456 or Apple MacBook Pro 16",
    )

    if st.button("✨ Auto-categorize", disabled=not flow.is_configured):
        apply_categorization(flow, raw_name)
    if not flow.is_configured:
        st.caption("Set GOOGLE_AI_API_KEY to enable auto-categorization.")

    if st.session_state.form_confidence:
        st.info(CONFIDENCE_BADGES[st.session_state.form_confidence])

    col1, col2 = st.columns(2)

    with col1:
        category = st.selectbox(
            "Category *",
            options=list(EXPENSE_CATEGORIES),
            index=list(EXPENSE_CATEGORIES).index(st.session_state.form_category),
        )
        subcategories = list(CATEGORY_SUBCATEGORIES[category])
        current_sub = st.session_state.form_subcategory
        subcategory = st.selectbox(
            "Subcategory",
            options=subcategories,
            index=subcategories.index(current_sub) if current_sub in subcategories else 0,
        )
        total_cost = st.number_input(
            "Total Cost *",
            min_value=0.0,
            step=1.0,
            format="%.2f",
        )
        usage_months = st.number_input(
            "Usage Period (months) *",
            min_value=1,
            value=12,
            step=1,
            help="How long will you use it? The cost is spread over this period.",
        )

    with col2:
        purchase_date = st.date_input("Purchase Date", value=date.today())
        brand_color = st.text_input("Brand Color", value=st.session_state.form_brand_color)
        brand_accent_color = st.text_input(
            "Accent Color", value=st.session_state.form_brand_accent_color
        )
        if st.session_state.form_image_url:
            st.image(st.session_state.form_image_url, width=160)

    notes = st.text_area("Notes (optional)")

    if st.button("💾 Save Expense", type="primary"):
        try:
            expense = Expense(
                name=raw_name,
                category=category,
                subcategory=subcategory,
                total_cost=Decimal(str(total_cost)),
                usage_months=int(usage_months),
                brand_color=brand_color or None,
                brand_accent_color=brand_accent_color or None,
                brand_logo_url=st.session_state.form_logo_url or None,
                image_url=st.session_state.form_image_url or None,
                purchase_date=purchase_date,
                notes=notes or None,
            )
        except ValueError as e:
            st.error(f"Please check the form: {e}")
            return

        st.session_state.expenses.append(expense)
        for key, value in FORM_DEFAULTS.items():
            st.session_state[key] = value
        st.success(
            f"Saved {expense.name}: {expense.monthly_cost:,.2f} per month"
        )


def render_expenses_page():
    """Render the expense list and summary."""
    st.title("📊 Your Expenses")

    expenses = st.session_state.expenses
    summary = calculate_expense_summary(expenses)

    col1, col2, col3 = st.columns(3)
    col1.metric("Monthly Cost", f"{summary.total_monthly_expense:,.2f}")
    col2.metric("Total Invested", f"{summary.total_investment:,.2f}")
    col3.metric("Expenses", summary.expense_count)

    if summary.top_categories:
        st.markdown("### By Category")
        st.bar_chart({c: float(v) for c, v in summary.top_categories})

    st.markdown("---")

    col1, col2, col3 = st.columns(3)
    with col1:
        category_filter = st.selectbox(
            "Filter by Category",
            options=[None] + list(EXPENSE_CATEGORIES),
            format_func=lambda x: "All Categories" if x is None else x,
        )
    with col2:
        search = st.text_input("Search")
    with col3:
        sort_by = st.selectbox(
            "Sort by",
            options=["monthly_cost", "total_cost", "name", "purchase_date"],
            format_func=lambda x: x.replace("_", " ").title(),
        )

    shown = sort_expenses(
        filter_expenses(expenses, category=category_filter, search=search),
        sort_by=sort_by,
        descending=sort_by != "name",
    )

    if not shown:
        st.info("Your expenses will appear here once you add them.")
        return

    for expense in shown:
        cols = st.columns([1, 4, 2])
        if expense.image_url:
            cols[0].image(expense.image_url, width=48)
        cols[1].markdown(
            f"**{expense.name}**  \n{expense.category}"
            + (f" · {expense.subcategory}" if expense.subcategory else "")
        )
        cols[2].markdown(
            f"**{expense.monthly_cost:,.2f}**/mo  \n"
            f"{expense.total_cost:,.2f} over {expense.usage_months} mo"
        )


def render_settings_page():
    st.title("⚙️ Settings")

    status = validate_all_settings()

    st.markdown("### Services")
    gemini, pixabay = st.columns(2)
    with gemini:
        if status.get("google_ai"):
            st.success("Gemini: API key found. Auto-categorize is on.")
        else:
            st.error(status.get("google_ai_error", "Gemini: no API key. Auto-categorize is off."))
    with pixabay:
        if status.get("pixabay"):
            st.success("Pixabay: API key found. Image search is on.")
        else:
            st.warning(
                status.get("pixabay_error", "Pixabay: no API key. Placeholder avatars are used.")
            )

    for group in ("avatar", "app"):
        if not status.get(group, True):
            st.error(f"Invalid {group} settings: {status.get(f'{group}_error')}")

    st.markdown("### Environment variables")
    st.code(
        "GOOGLE_AI_API_KEY=...\n"
        "GOOGLE_AI_MODEL_NAME=gemini-2.5-flash\n"
        "PIXABAY_API_KEY=...   # optional",
        language="bash",
    )
    st.caption("Put these in a `.env` file next to the app. See `.env.example`.")


if __name__ == "__main__":
    main()
