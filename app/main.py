"""
Streamlit Frontend for Nexus Ledger

This is the user interface a small-business owner uses every day to
record purchases and sales and to read the books.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Every form posts exactly one event through the ledger engine
3. Clear error messages when the engine refuses an event
4. Visual feedback for all operations
5. No hidden actions

The UI never computes a posting itself. It collects parameters, hands
them to the bookkeeping flow, and renders whatever the books now say.
"""

import asyncio
from datetime import date

import streamlit as st

from nexusledger.audit import create_correlation_id
from nexusledger.config import get_settings, validate_all_settings
from nexusledger.models.accounts import PREDEFINED_ACCOUNTS
from nexusledger.models.ledger import StockStatus, TransactionType
from nexusledger.orchestrator import AnalystFlow, BookkeepingFlow, create_app_components
from nexusledger.reports import (
    balance_sheet,
    dashboard_metrics,
    filter_transactions,
    income_statement,
    ledger_newest_first,
    parties,
    sales_trend,
    sellable_products,
    trial_balance,
)
from nexusledger.services.locale import (
    LANGUAGE_NAMES,
    SUPPORTED_CURRENCIES,
    format_currency,
    get_label,
)
from nexusledger.services.snapshot import SnapshotFormatError, export_snapshot
from nexusledger.services.storage import StorageError


# Page configuration
st.set_page_config(
    page_title="Nexus Ledger",
    page_icon="📒",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .warning-box {
        padding: 20px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
</style>
""", unsafe_allow_html=True)


STATUS_LABEL_KEYS = {
    StockStatus.IN_STOCK: "inStock",
    StockStatus.LOW_STOCK: "lowStock",
    StockStatus.OUT_OF_STOCK: "outOfStock",
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
def get_components():
    """Get or create application components and restore the books (cached)."""
    try:
        bookkeeping_flow, analyst_flow = create_app_components(use_storage=True)
        run_async(bookkeeping_flow.load())
    except (StorageError, SnapshotFormatError, OSError) as e:
        st.error(f"Could not restore saved books, starting without storage: {e}")
        bookkeeping_flow, analyst_flow = create_app_components(use_storage=False)
    return bookkeeping_flow, analyst_flow


def t(key: str) -> str:
    """Label in the selected language."""
    return get_label(st.session_state.language, key)


def money(amount) -> str:
    return format_currency(amount, st.session_state.currency)


def init_session_state():
    settings = get_settings().app
    if "language" not in st.session_state:
        st.session_state.language = settings.default_language
    if "currency" not in st.session_state:
        st.session_state.currency = settings.default_currency
    if "api_key" not in st.session_state:
        st.session_state.api_key = ""
    if "chat" not in st.session_state:
        st.session_state.chat = []
    if "onboarding_skipped" not in st.session_state:
        st.session_state.onboarding_skipped = False


def show_posting_outcome(result, success_message: str, bookkeeping_flow: BookkeepingFlow):
    if result.success:
        st.success(success_message)
        if bookkeeping_flow.last_save_error:
            st.warning(f"Recorded, but saving failed: {bookkeeping_flow.last_save_error}")
    else:
        st.error(result.error.message)


def main():
    """Main application entry point."""
    init_session_state()
    bookkeeping_flow, analyst_flow = get_components()

    if bookkeeping_flow.needs_onboarding and not st.session_state.onboarding_skipped:
        render_onboarding_page(bookkeeping_flow)
        return

    data = bookkeeping_flow.data

    # Sidebar navigation
    st.sidebar.title("📒 Nexus Ledger")
    profile = data.user_profile
    if profile and profile.business_name:
        st.sidebar.markdown(f"**{profile.business_name}**  \n{profile.location}")
    st.sidebar.markdown("---")

    pages = {
        "dashboard": "📊",
        "purchases": "🛒",
        "sales": "💵",
        "inventory": "📦",
        "accounting": "📚",
        "aiAnalyst": "🤖",
        "settings": "⚙️",
    }
    page = st.sidebar.radio(
        "Navigate to:",
        list(pages),
        format_func=lambda key: f"{pages[key]} {t(key)}",
        index=0,
    )

    if page == "dashboard":
        render_dashboard_page(bookkeeping_flow)
    elif page == "purchases":
        render_purchases_page(bookkeeping_flow)
    elif page == "sales":
        render_sales_page(bookkeeping_flow)
    elif page == "inventory":
        render_inventory_page(bookkeeping_flow)
    elif page == "accounting":
        render_accounting_page(bookkeeping_flow)
    elif page == "aiAnalyst":
        render_analyst_page(bookkeeping_flow, analyst_flow)
    elif page == "settings":
        render_settings_page(bookkeeping_flow)


def render_onboarding_page(bookkeeping_flow: BookkeepingFlow):
    """First-run setup: who runs the business and, optionally, the analyst key."""
    st.title(f"📒 {t('welcome')}")
    st.markdown(t("setupDescription"))

    with st.form("onboarding_form"):
        name = st.text_input(f"{t('yourName')} *")
        business_name = st.text_input(f"{t('businessName')} *")
        location = st.text_input(t("location"))
        api_key = st.text_input(t("enterApiKey"), type="password")
        submitted = st.form_submit_button(t("getStarted"), type="primary")

    if submitted:
        if not name.strip() or not business_name.strip():
            st.error(f"{t('yourName')} and {t('businessName')} are required")
        else:
            run_async(bookkeeping_flow.update_profile(
                name=name,
                business_name=business_name,
                location=location,
                correlation_id=create_correlation_id(),
            ))
            if api_key:
                st.session_state.api_key = api_key
            st.rerun()

    if st.button("Skip for now"):
        st.session_state.onboarding_skipped = True
        st.rerun()


def render_dashboard_page(bookkeeping_flow: BookkeepingFlow):
    """Headline metrics, inventory valuation and recent sales."""
    data = bookkeeping_flow.data
    st.title(f"📊 {t('dashboard')}")
    st.markdown(t("execOverview"))

    metrics = dashboard_metrics(data)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric(t("totalStockValue"), money(metrics.total_stock_value))
    col2.metric(t("totalRevenue"), money(metrics.total_revenue))
    col3.metric(t("totalExpenses"), money(metrics.total_purchases))
    col4.metric(t("netCashFlow"), money(metrics.net_cash_flow))

    col1, col2 = st.columns(2)
    with col1:
        st.subheader(t("inventoryValuation"))
        rows = bookkeeping_flow.inventory()
        if rows:
            st.bar_chart(
                {
                    t("product"): [row.name for row in rows],
                    t("totalValue"): [float(row.total_value) for row in rows],
                },
                x=t("product"),
                y=t("totalValue"),
            )
        else:
            st.info(t("noData"))

    with col2:
        st.subheader(t("recentSales"))
        trend = sales_trend(data.transactions)
        if trend:
            st.line_chart(
                {
                    t("date"): [point.date.strftime("%Y-%m-%d %H:%M") for point in trend],
                    t("totalAmount"): [float(point.amount) for point in trend],
                },
                x=t("date"),
                y=t("totalAmount"),
            )
        else:
            st.info(t("noData"))


def render_transactions_table(transactions):
    if not transactions:
        st.info(t("noData"))
        return
    st.dataframe(
        [
            {
                t("date"): tx.date.strftime("%Y-%m-%d %H:%M"),
                t("product"): tx.product_name,
                t("party"): tx.party,
                t("quantity"): str(tx.quantity),
                t("unitPrice"): money(tx.unit_price),
                t("totalAmount"): money(tx.total_amount),
            }
            for tx in transactions
        ],
        use_container_width=True,
        hide_index=True,
    )


def render_purchases_page(bookkeeping_flow: BookkeepingFlow):
    """Purchase history with filters, and the new-purchase form."""
    data = bookkeeping_flow.data
    st.title(f"🛒 {t('purchases')}")
    st.markdown(t("procurement"))

    with st.expander(f"➕ {t('newPurchase')}"):
        with st.form("purchase_form", clear_on_submit=True):
            col1, col2 = st.columns(2)
            with col1:
                product_name = st.text_input(f"{t('productName')} *")
                sku = st.text_input(f"{t('sku')} *", help="An existing SKU restocks that product")
                supplier = st.text_input(f"{t('supplier')} *")
            with col2:
                quantity = st.number_input(f"{t('quantity')} *", min_value=1, step=1, value=1)
                unit_cost = st.number_input(
                    f"{t('unitCost')} ({st.session_state.currency}) *",
                    min_value=0.0,
                    step=0.01,
                    format="%.2f",
                )
            submitted = st.form_submit_button(t("confirm"), type="primary")

        if submitted:
            if not supplier.strip():
                st.error(f"{t('supplier')} is required")
            else:
                result = run_async(bookkeeping_flow.record_purchase(
                    product_name=product_name,
                    sku=sku,
                    quantity=quantity,
                    unit_cost=f"{unit_cost:.2f}",
                    supplier=supplier,
                    correlation_id=create_correlation_id(),
                ))
                show_posting_outcome(result, "✅ Purchase recorded", bookkeeping_flow)
                data = bookkeeping_flow.data

    col1, col2, col3 = st.columns([2, 2, 2])
    with col1:
        search = st.text_input(t("searchPurchases"))
    with col2:
        suppliers = parties(data.transactions, TransactionType.PURCHASE)
        supplier_filter = st.selectbox(
            t("supplier"),
            options=[""] + suppliers,
            format_func=lambda s: s or t("allSuppliers"),
        )
    with col3:
        date_range = st.date_input(t("date"), value=[])

    date_from, date_to = _date_bounds(date_range)
    render_transactions_table(filter_transactions(
        data.transactions,
        kind=TransactionType.PURCHASE,
        search=search,
        party=supplier_filter or None,
        date_from=date_from,
        date_to=date_to,
    ))


def _date_bounds(date_range):
    if isinstance(date_range, date):
        return date_range, date_range
    if len(date_range) == 2:
        return date_range[0], date_range[1]
    if len(date_range) == 1:
        return date_range[0], None
    return None, None


def render_sales_page(bookkeeping_flow: BookkeepingFlow):
    """Sales history and the record-sale form (products with stock only)."""
    data = bookkeeping_flow.data
    st.title(f"💵 {t('sales')}")
    st.markdown(t("trackRevenue"))

    with st.expander(f"➕ {t('recordSale')}"):
        available = sellable_products(data.products)
        if not available:
            st.info(t("noData"))
        else:
            by_id = {p.id: p for p in available}
            # Outside the form so the suggested price follows the selection
            product_id = st.selectbox(
                f"{t('product')} *",
                options=list(by_id),
                format_func=lambda pid: f"{by_id[pid].name} ({by_id[pid].sku}) · {by_id[pid].quantity}",
                key="sale_product",
            )
            product = by_id[product_id]
            with st.form("sale_form", clear_on_submit=True):
                col1, col2 = st.columns(2)
                with col1:
                    quantity = st.number_input(f"{t('quantity')} *", min_value=1, step=1, value=1)
                    customer = st.text_input(f"{t('customer')} *")
                with col2:
                    unit_price = st.number_input(
                        f"{t('unitPrice')} ({st.session_state.currency}) *",
                        min_value=0.0,
                        step=0.01,
                        format="%.2f",
                        value=float(product.selling_price),
                        key=f"sale_price_{product.id}",
                    )
                submitted = st.form_submit_button(t("recordSale"), type="primary")

            if submitted:
                if not customer.strip():
                    st.error(f"{t('customer')} is required")
                else:
                    result = run_async(bookkeeping_flow.record_sale(
                        product_id=product.id,
                        quantity=quantity,
                        unit_price=f"{unit_price:.2f}",
                        customer=customer,
                        correlation_id=create_correlation_id(),
                    ))
                    show_posting_outcome(result, "✅ Sale recorded", bookkeeping_flow)
                    data = bookkeeping_flow.data

    search = st.text_input(t("searchSales"))
    render_transactions_table(filter_transactions(
        data.transactions,
        kind=TransactionType.SALE,
        search=search,
    ))


def render_inventory_page(bookkeeping_flow: BookkeepingFlow):
    """Stock levels, valuation and status per product."""
    st.title(f"📦 {t('inventory')}")
    st.markdown(t("realTimeStock"))

    rows = bookkeeping_flow.inventory()
    if not rows:
        st.info(t("noData"))
        return

    st.dataframe(
        [
            {
                t("sku"): row.sku,
                t("product"): row.name,
                t("quantity"): str(row.quantity),
                t("avgCost"): money(row.average_cost),
                t("totalValue"): money(row.total_value),
                t("status"): t(STATUS_LABEL_KEYS[row.status]),
            }
            for row in rows
        ],
        use_container_width=True,
        hide_index=True,
    )


def render_accounting_page(bookkeeping_flow: BookkeepingFlow):
    """General ledger, trial balance, statements and manual entries."""
    data = bookkeeping_flow.data
    st.title(f"📚 {t('accounting')}")
    st.markdown(t("financialAccounting"))

    with st.expander(f"➕ {t('newJournalEntry')}"):
        with st.form("journal_form", clear_on_submit=True):
            col1, col2 = st.columns(2)
            with col1:
                debit_account = st.selectbox(f"{t('debit')} {t('account')}", PREDEFINED_ACCOUNTS)
            with col2:
                credit_account = st.selectbox(
                    f"{t('credit')} {t('account')}", PREDEFINED_ACCOUNTS, index=1,
                )
            amount = st.number_input(
                f"{t('total')} ({st.session_state.currency}) *",
                min_value=0.0,
                step=0.01,
                format="%.2f",
            )
            description = st.text_input(t("description"))
            submitted = st.form_submit_button(t("postEntry"), type="primary")

        if submitted:
            result = run_async(bookkeeping_flow.record_manual_entry(
                debit_account=debit_account,
                credit_account=credit_account,
                amount=f"{amount:.2f}",
                description=description,
                correlation_id=create_correlation_id(),
            ))
            show_posting_outcome(result, "✅ Entry posted", bookkeeping_flow)
            data = bookkeeping_flow.data

    st.subheader(t("accountBalances"))
    tb = trial_balance(data.ledger)
    if tb.rows:
        cols = st.columns(min(len(tb.rows), 4))
        for i, row in enumerate(tb.rows):
            with cols[i % len(cols)]:
                st.markdown(
                    f"**{row.account}**  \n"
                    f"{t('debit')}: {money(row.debit)}  \n"
                    f"{t('credit')}: {money(row.credit)}  \n"
                    f"Net: {money(row.net)} {row.net_side}"
                )
        if not tb.is_balanced:
            st.warning(f"{t('trialBalance')}: {money(tb.total_debit)} ≠ {money(tb.total_credit)}")

        col1, col2 = st.columns(2)
        with col1:
            statement = income_statement(data.ledger)
            st.markdown("#### Income Statement")
            st.markdown(
                f"Revenue: {money(statement.revenue)}  \n"
                f"Expenses: {money(statement.expenses)}  \n"
                f"**Net income: {money(statement.net_income)}**"
            )
        with col2:
            sheet = balance_sheet(data.ledger)
            st.markdown("#### Balance Sheet")
            st.markdown(
                f"Assets: {money(sheet.assets)}  \n"
                f"Liabilities: {money(sheet.liabilities)}  \n"
                f"Equity: {money(sheet.equity)}  \n"
                f"Retained earnings: {money(sheet.retained_earnings)}"
            )
            if sheet.unclassified_accounts:
                st.caption("Unclassified: " + ", ".join(sheet.unclassified_accounts))
    else:
        st.info(t("noData"))

    st.subheader(t("generalLedger"))
    entries = ledger_newest_first(data.ledger)
    if entries:
        st.dataframe(
            [
                {
                    t("date"): e.date.strftime("%Y-%m-%d %H:%M"),
                    t("id"): e.transaction_id,
                    t("description"): e.description,
                    t("account"): e.account,
                    t("debit"): money(e.debit) if e.debit > 0 else "-",
                    t("credit"): money(e.credit) if e.credit > 0 else "-",
                }
                for e in entries
            ],
            use_container_width=True,
            hide_index=True,
        )
    else:
        st.info(t("noData"))


def render_analyst_page(bookkeeping_flow: BookkeepingFlow, analyst_flow: AnalystFlow):
    """Chat with the AI analyst over a read-only copy of the books."""
    st.title(f"🤖 {t('aiAnalyst')}")

    with st.chat_message("assistant"):
        st.markdown(t("aiGreeting"))

    for role, text in st.session_state.chat:
        with st.chat_message(role):
            st.markdown(text)

    question = st.chat_input(t("typeMessage"))
    if question:
        st.session_state.chat.append(("user", question))
        with st.chat_message("user"):
            st.markdown(question)

        with st.chat_message("assistant"):
            with st.spinner(t("analyzing")):
                response = run_async(analyst_flow.ask(
                    data=bookkeeping_flow.data,
                    question=question,
                    api_key=st.session_state.api_key or None,
                    correlation_id=create_correlation_id(),
                ))
            st.markdown(response.text)
        st.session_state.chat.append(("assistant", response.text))


def render_settings_page(bookkeeping_flow: BookkeepingFlow):
    """Profile, preferences, API key and backup import/export."""
    st.title(f"⚙️ {t('systemSettings')}")

    profile = bookkeeping_flow.data.user_profile
    st.markdown(f"### {t('profileSetup')}")
    with st.form("profile_form"):
        name = st.text_input(t("yourName"), value=profile.name if profile else "")
        business_name = st.text_input(
            t("businessName"), value=profile.business_name if profile else "",
        )
        location = st.text_input(t("location"), value=profile.location if profile else "")
        if st.form_submit_button(t("save")):
            run_async(bookkeeping_flow.update_profile(
                name=name,
                business_name=business_name,
                location=location,
                correlation_id=create_correlation_id(),
            ))
            st.success("✅ Profile saved")

    st.markdown(f"### {t('preferences')}")
    col1, col2 = st.columns(2)
    with col1:
        languages = list(LANGUAGE_NAMES)
        st.selectbox(
            t("language"),
            options=languages,
            format_func=lambda code: LANGUAGE_NAMES[code],
            key="language",
        )
    with col2:
        st.selectbox(
            t("currency"),
            options=list(SUPPORTED_CURRENCIES),
            format_func=lambda code: f"{code} ({SUPPORTED_CURRENCIES[code][0]})",
            key="currency",
        )

    st.text_input(t("enterApiKey"), type="password", key="api_key")

    st.markdown("### Backup")
    col1, col2 = st.columns(2)
    with col1:
        filename, text = export_snapshot(bookkeeping_flow.data)
        st.download_button(
            f"⬇️ {t('exportData')}",
            data=text,
            file_name=filename,
            mime="application/json",
            # Audit only when the download is actually taken
            on_click=lambda: run_async(bookkeeping_flow.export_data(
                correlation_id=create_correlation_id(),
            )),
        )
    with col2:
        uploaded = st.file_uploader(t("importData"), type=["json"])
        if uploaded and st.button(f"⬆️ {t('importData')}", type="primary"):
            try:
                result = run_async(bookkeeping_flow.import_data(
                    uploaded.getvalue(),
                    correlation_id=create_correlation_id(),
                ))
            except SnapshotFormatError as e:
                st.markdown(f"""
                <div class="error-box">
                    <h4>❌ {e.message}</h4>
                </div>
                """, unsafe_allow_html=True)
            else:
                st.success("✅ Books imported")
                for warning in result.warnings:
                    st.warning(warning)

    st.markdown("---")
    st.markdown("### Connection Status")
    status = validate_all_settings()
    if status.get("gemini"):
        st.success("✅ Gemini (AI Analyst) - Configured")
    elif st.session_state.api_key:
        st.info("🔑 Gemini (AI Analyst) - Using the key entered above")
    else:
        st.error(f"❌ Gemini (AI Analyst) - {status.get('gemini_error', 'Not configured')}")


if __name__ == "__main__":
    main()
