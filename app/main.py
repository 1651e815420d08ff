"""
Streamlit Frontend for FinDash

The screens a user moves between every day: the monthly dashboard,
the reports list with its trend chart, savings goals and the profile
(categories and theme).

DESIGN PRINCIPLES:
1. The UI only renders; every number comes from the store or the
   aggregation functions
2. Dialogs go through the form logic, so invalid input is explained,
   never saved
3. Destructive actions ask for confirmation first
"""

from datetime import date

import pandas as pd
import streamlit as st

from findash.audit import AuditLogger
from findash.config import get_settings, validate_all_settings
from findash.formatting import format_currency, format_percentage, month_label
from findash.forms import (
    CategoryForm,
    EditorState,
    GoalForm,
    TransactionEditor,
)
from findash.models import CategoryIcon, Theme, TransactionType
from findash.reports import (
    goal_bar_width,
    goal_progress,
    shift_month,
    transactions_for_month,
)
from findash.services.storage import create_storage
from findash.store import CategoryInUseError, EntityStore


# Page configuration
st.set_page_config(
    page_title="FinDash",
    page_icon="💸",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .card {
        padding: 20px;
        border-radius: 16px;
        margin: 6px 0;
    }
    .income { background-color: rgba(34, 197, 94, 0.12); }
    .expense { background-color: rgba(239, 68, 68, 0.12); }
    .balance { background-color: rgba(59, 130, 246, 0.12); }
    .big-number {
        font-size: 2em;
        font-weight: bold;
    }
</style>
""", unsafe_allow_html=True)


TYPE_LABELS = {
    TransactionType.INCOME: "Receita",
    TransactionType.EXPENSE: "Despesa",
}


@st.cache_resource
def get_components():
    """Create the store and audit logger once per server process."""
    audit_logger = AuditLogger()
    store = EntityStore(create_storage(), audit_logger=audit_logger)
    store.load()
    return store, audit_logger


def get_editor(store: EntityStore, audit_logger: AuditLogger) -> TransactionEditor:
    """The add/edit dialog state belongs to one browser session."""
    if "editor" not in st.session_state:
        st.session_state.editor = TransactionEditor(store, audit_logger=audit_logger)
    return st.session_state.editor


def main():
    """Main application entry point."""
    store, audit_logger = get_components()
    editor = get_editor(store, audit_logger)

    st.sidebar.title("💸 FinDash")
    st.sidebar.markdown(
        f"<div style='height:4px;background:{store.theme.color}'></div>",
        unsafe_allow_html=True,
    )
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navegar:",
        ["🏠 Início", "📊 Relatórios", "🎯 Metas", "👤 Perfil"],
        index=0,
    )

    st.sidebar.markdown("---")
    if st.sidebar.button("➕ Nova transação", type="primary"):
        editor.open_create()

    if editor.is_open:
        render_transaction_editor(store, editor)

    if page == "🏠 Início":
        render_dashboard_page(store)
    elif page == "📊 Relatórios":
        render_reports_page(store, editor)
    elif page == "🎯 Metas":
        render_goals_page(store)
    elif page == "👤 Perfil":
        render_profile_page(store, audit_logger)


def render_dashboard_page(store: EntityStore):
    """Current-month cards plus the first goal."""
    st.title("🏠 Início")

    summary = store.current_month_summary()
    col1, col2, col3 = st.columns(3)
    cards = [
        (col1, "income", "Receita Total", summary.income),
        (col2, "expense", "Despesa Total", summary.expense),
        (col3, "balance", "Saldo Líquido", summary.balance),
    ]
    for column, css_class, title, value in cards:
        with column:
            st.markdown(f"""
            <div class="card {css_class}">
                <p>{title}</p>
                <p class="big-number">{format_currency(value)}</p>
            </div>
            """, unsafe_allow_html=True)

    st.caption(f"Saldo acumulado: {format_currency(store.total_balance())}")

    if store.goals:
        goal = store.goals[0]
        st.markdown("---")
        st.subheader("🎯 Próxima Meta")
        st.markdown(f"**{goal.name}** · {format_percentage(goal_progress(goal))}")
        st.progress(goal_bar_width(goal) / 100)


def render_reports_page(store: EntityStore, editor: TransactionEditor):
    """Trend chart and the month's transaction list."""
    st.title("📊 Relatórios")

    series = list(store.chart_series())
    chart = pd.DataFrame(
        {
            "Receitas": [bucket.income for bucket in series],
            "Despesas": [bucket.expense for bucket in series],
        },
        index=pd.to_datetime([date(b.year, b.month, 1) for b in series]),
    )
    st.area_chart(chart)

    today = date.today()
    if "report_month" not in st.session_state:
        st.session_state.report_month = (today.year, today.month)
    year, month = st.session_state.report_month

    col1, col2, col3 = st.columns([1, 3, 1])
    with col1:
        if st.button("◀"):
            st.session_state.report_month = shift_month(year, month, -1)
            st.rerun()
    with col2:
        st.markdown(f"### {month_label(month)} {year}")
    with col3:
        if st.button("▶"):
            st.session_state.report_month = shift_month(year, month, 1)
            st.rerun()

    type_filter = st.radio(
        "Filtro",
        options=[None, TransactionType.INCOME, TransactionType.EXPENSE],
        format_func=lambda x: "Todos" if x is None else TYPE_LABELS[x] + "s",
        horizontal=True,
    )

    transactions = transactions_for_month(store.transactions, year, month, type_filter)
    if not transactions:
        st.info("Nenhuma transação neste mês.")
        return

    for transaction in transactions:
        category = store.get_category(transaction.category_id)
        icon = category.icon.glyph if category else CategoryIcon.DEFAULT.glyph
        name = category.name if category else "Sem categoria"
        sign = "+" if transaction.is_income else "-"

        with st.expander(
            f"{icon} {transaction.description} · {sign}{format_currency(transaction.amount)}"
        ):
            st.markdown(f"**Categoria:** {name}")
            st.markdown(f"**Data:** {transaction.date.strftime('%d/%m/%Y')}")
            if transaction.notes:
                st.markdown(f"**Notas:** {transaction.notes}")
            for item in transaction.sub_items or []:
                st.markdown(f"- {item.description}: {format_currency(item.amount)}")

            col1, col2, col3 = st.columns(3)
            with col1:
                if st.button("✏️ Editar", key=f"edit_{transaction.id}"):
                    editor.open_edit(transaction.id)
                    st.rerun()
            with col2:
                new_date = st.date_input(
                    "Duplicar para",
                    value=None,
                    key=f"dup_date_{transaction.id}",
                )
                if st.button("📄 Duplicar", key=f"dup_{transaction.id}"):
                    store.duplicate_transaction(transaction.id, new_date)
                    st.rerun()
            with col3:
                confirm = st.checkbox("Confirmar", key=f"confirm_del_{transaction.id}")
                if st.button("🗑️ Excluir", key=f"del_{transaction.id}", disabled=not confirm):
                    store.delete_transaction(transaction.id)
                    st.rerun()


def render_transaction_editor(store: EntityStore, editor: TransactionEditor):
    """Add/edit transaction dialog, rendered at the top of the page."""
    form = editor.form
    editing = editor.state == EditorState.OPEN_EDIT
    st.subheader("Editar Transação" if editing else "Adicionar Transação")

    form.type = st.radio(
        "Tipo",
        options=list(TransactionType),
        index=list(TransactionType).index(form.type),
        format_func=lambda x: TYPE_LABELS[x],
        horizontal=True,
    )
    form.description = st.text_input("Descrição *", value=form.description)

    categories = store.categories_for_type(form.type)
    category_ids = [""] + [c.id for c in categories]
    names = {c.id: f"{c.icon.glyph} {c.name}" for c in categories}
    current = form.category_id if form.category_id in category_ids else ""
    form.category_id = st.selectbox(
        "Categoria *",
        options=category_ids,
        index=category_ids.index(current),
        format_func=lambda x: names.get(x, "Selecione..."),
    )

    col1, col2 = st.columns(2)
    with col1:
        form.date = st.date_input("Data *", value=form.date)
    with col2:
        if form.is_expense:
            form.initial_amount = st.number_input(
                "Valor (R$) *",
                value=float(form.initial_amount or 0.0),
                min_value=0.0,
                step=0.01,
                format="%.2f",
            )

    st.markdown("**Itens**")
    for index, row in enumerate(list(form.rows)):
        col1, col2, col3, col4, col5 = st.columns([4, 2, 1, 1, 1])
        with col1:
            row.description = st.text_input(
                "Descrição do item",
                value=row.description,
                key=f"row_desc_{row.id}",
                label_visibility="collapsed",
            )
        with col2:
            row.amount = st.number_input(
                "Valor do item",
                value=float(row.amount),
                min_value=0.0,
                step=0.01,
                key=f"row_amount_{row.id}",
                label_visibility="collapsed",
            )
        with col3:
            if st.button("▲", key=f"row_up_{row.id}"):
                form.move_row_up(index)
                st.rerun()
        with col4:
            if st.button("▼", key=f"row_down_{row.id}"):
                form.move_row_down(index)
                st.rerun()
        with col5:
            if st.button("✖", key=f"row_del_{row.id}"):
                form.remove_row(index)
                st.rerun()

    if st.button("➕ Adicionar item"):
        form.add_row()
        st.rerun()

    if form.is_expense and form.counted_rows and form.remainder > 0:
        st.caption(f"Sobra: {format_currency(form.remainder)}")
    st.markdown(f"**Total:** {format_currency(form.total_amount)}")

    form.notes = st.text_area("Notas", value=form.notes)

    col1, col2 = st.columns(2)
    with col1:
        if st.button("💾 Salvar", type="primary"):
            outcome = editor.submit()
            if outcome.validation.has_errors:
                for message in outcome.validation.messages:
                    st.error(message)
            else:
                if not outcome.saved:
                    st.warning("Esta transação não existe mais.")
                st.rerun()
    with col2:
        if st.button("Cancelar"):
            editor.cancel()
            st.rerun()

    st.markdown("---")


def render_goals_page(store: EntityStore):
    """Goal list with progress bars and the add/edit dialog."""
    st.title("🎯 Metas")

    if "goal_form" not in st.session_state:
        st.session_state.goal_form = None

    if st.button("➕ Nova meta"):
        st.session_state.goal_form = GoalForm()

    form = st.session_state.goal_form
    if form is not None:
        render_goal_form(store, form)

    for goal in store.goals:
        st.markdown(f"#### {goal.name}")
        if goal.description:
            st.caption(goal.description)
        st.markdown(
            f"{format_currency(goal.current_amount)} / {format_currency(goal.target_amount)}"
            f" · {format_percentage(goal_progress(goal))}"
        )
        st.progress(goal_bar_width(goal) / 100)

        col1, col2 = st.columns(2)
        with col1:
            if st.button("✏️ Editar", key=f"goal_edit_{goal.id}"):
                st.session_state.goal_form = GoalForm.from_goal(goal)
                st.rerun()
        with col2:
            confirm = st.checkbox("Confirmar", key=f"goal_confirm_{goal.id}")
            if st.button("🗑️ Excluir", key=f"goal_del_{goal.id}", disabled=not confirm):
                store.delete_goal(goal.id)
                st.rerun()


def render_goal_form(store: EntityStore, form: GoalForm):
    st.subheader("Editar Meta" if form.is_editing else "Nova Meta")
    form.name = st.text_input("Nome *", value=form.name)
    form.description = st.text_area("Descrição", value=form.description)
    form.target_amount = st.number_input(
        "Valor alvo (R$) *",
        value=float(form.target_amount),
        min_value=0.0,
        step=0.01,
    )
    if form.is_editing:
        form.current_amount = st.number_input(
            "Valor atual (R$)",
            value=float(form.current_amount),
            min_value=0.0,
            step=0.01,
        )

    col1, col2 = st.columns(2)
    with col1:
        if st.button("💾 Salvar meta", type="primary"):
            result = form.validate()
            if result.has_errors:
                for message in result.messages:
                    st.error(message)
            else:
                if form.is_editing:
                    store.update_goal(form.build_goal())
                else:
                    store.add_goal(form.build())
                st.session_state.goal_form = None
                st.rerun()
    with col2:
        if st.button("Cancelar", key="goal_cancel"):
            st.session_state.goal_form = None
            st.rerun()
    st.markdown("---")


def render_profile_page(store: EntityStore, audit_logger: AuditLogger):
    """Categories, theme and diagnostics."""
    st.title("👤 Perfil")

    st.markdown("### Tema")
    themes = list(Theme)
    theme = st.selectbox(
        "Tema",
        options=themes,
        index=themes.index(store.theme),
        format_func=lambda x: x.value.capitalize(),
    )
    if theme != store.theme:
        store.set_theme(theme)
        st.rerun()

    st.markdown("---")
    for type_, title in [
        (TransactionType.INCOME, "Categorias de Receita"),
        (TransactionType.EXPENSE, "Categorias de Despesa"),
    ]:
        st.markdown(f"### {title}")
        for category in store.categories_for_type(type_):
            col1, col2 = st.columns([5, 1])
            with col1:
                st.markdown(f"{category.icon.glyph} {category.name}")
            with col2:
                if st.button("🗑️", key=f"cat_del_{category.id}"):
                    try:
                        store.delete_category(category.id)
                        st.rerun()
                    except CategoryInUseError as e:
                        st.error(
                            f"'{category.name}' está em uso por "
                            f"{e.references} transação(ões)."
                        )

    with st.expander("➕ Adicionar categoria"):
        form = CategoryForm(
            name=st.text_input("Nome da categoria *"),
            type_=st.radio(
                "Tipo da categoria",
                options=list(TransactionType),
                format_func=lambda x: TYPE_LABELS[x],
                index=1,
                horizontal=True,
            ),
            icon=st.selectbox(
                "Ícone",
                options=[icon for icon in CategoryIcon if icon != CategoryIcon.DEFAULT],
                format_func=lambda x: f"{x.glyph} {x.value}",
            ),
        )
        if st.button("💾 Salvar Categoria"):
            result = form.validate()
            if result.has_errors:
                for message in result.messages:
                    st.error(message)
            else:
                store.add_category(form.build())
                st.rerun()

    st.markdown("---")
    st.markdown("### Diagnóstico")

    status = validate_all_settings()
    for key in ("storage", "app"):
        if status.get(key, False):
            st.success(f"✅ Configuração '{key}' válida")
        else:
            st.error(f"❌ {key}: {status.get(f'{key}_error', 'inválida')}")

    if get_settings().app.debug_mode:
        with st.expander("🧾 Atividade recente"):
            for event in audit_logger.recent_events(limit=20):
                st.markdown(
                    f"`{event.timestamp.strftime('%H:%M:%S')}` "
                    f"**{event.event_type.value}** · {event.description}"
                )


if __name__ == "__main__":
    main()
