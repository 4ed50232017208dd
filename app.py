import streamlit as st

from query_wizard.core.exceptions import ConfigError, GenerationError
from query_wizard.core.generator import SearchStringGenerator
from query_wizard.models.models import DATABASE_PROFILES, ApiProvider, ApiSettings, Database
from query_wizard.utils.constants import LOG_DIR
from query_wizard.utils.io_utils import load_config, load_default_api_key, save_config
from query_wizard.utils.logging_config import setup_logging

# Page Configuration
st.set_page_config(
    page_title="学术检索生成器",
    page_icon="🔎",
    layout="centered",
)

STEP_DEFINE_DOMAIN = 1
STEP_SELECT_DB = 2
STEP_RESULT = 3


@st.cache_resource
def get_generator(request_timeout: float | None) -> SearchStringGenerator:
    return SearchStringGenerator(default_api_key=load_default_api_key(), request_timeout=request_timeout)


def init_state() -> None:
    defaults = {
        "step": STEP_DEFINE_DOMAIN,
        "domain": "",
        "database": Database.SCOPUS,
        "query": "",
        "query_error": "",
    }
    for key, value in defaults.items():
        st.session_state.setdefault(key, value)


def render_settings(config) -> ApiSettings:
    """サイドバーに API 設定フォームを表示する (APIキーはセッション内のみ保持)"""
    st.sidebar.header("⚙️ API 设置")
    providers = list(ApiProvider)
    provider = st.sidebar.selectbox(
        "服务商",
        providers,
        index=providers.index(config.api.provider),
        format_func=lambda p: p.value,
    )
    placeholder = "gemini-3-flash-preview" if provider == ApiProvider.GOOGLE else "gpt-4o"
    model_name = st.sidebar.text_input("模型名称", config.api.model_name, placeholder=placeholder)

    base_url = None
    if provider == ApiProvider.OPENAI_COMPATIBLE:
        base_url = st.sidebar.text_input(
            "Base URL", config.api.base_url or "", placeholder="https://api.openai.com/v1"
        ) or None
    api_key = st.sidebar.text_input("API Key", type="password", placeholder="留空则使用默认密钥") or None

    settings = ApiSettings(provider=provider, api_key=api_key, base_url=base_url, model_name=model_name)

    if st.sidebar.button("💾 保存设置"):
        save_config(config.model_copy(update={"api": settings}))
        st.sidebar.success("设置已保存（不含 API Key）")
    return settings


def render_define_domain(generator: SearchStringGenerator, settings: ApiSettings) -> None:
    st.subheader("1. 确定研究领域")
    mode = st.radio("输入方式", ["AI 智能提取", "手动输入"], horizontal=True)

    if mode == "AI 智能提取":
        description = st.text_area(
            "研究内容", placeholder="例如：我正在研究关于老年人跌倒风险预测的人工智能模型..."
        )
        if st.button("✨ 提取大领域"):
            if not description.strip():
                st.error("请输入您的研究内容")
            else:
                with st.spinner("提取中..."):
                    try:
                        st.session_state.domain = generator.identify_domain(description, settings)
                    except GenerationError:
                        st.error("无法识别，请尝试手动输入")

    domain = st.text_input("确认领域名称", st.session_state.domain, placeholder="请输入研究领域（例如：锂离子电池硅负极）")
    st.session_state.domain = domain
    if st.button("下一步", disabled=not domain.strip()):
        st.session_state.step = STEP_SELECT_DB
        st.rerun()


def run_generation(generator: SearchStringGenerator, settings: ApiSettings) -> None:
    st.session_state.query = ""
    st.session_state.query_error = ""
    with st.spinner("生成中..."):
        try:
            st.session_state.query = generator.generate_search_string(
                st.session_state.domain, st.session_state.database, settings
            )
        except GenerationError:
            st.session_state.query_error = "生成检索式失败，请重试"


def render_select_database(generator: SearchStringGenerator, settings: ApiSettings) -> None:
    st.subheader("2. 选择数据库")
    st.caption(f"领域: **{st.session_state.domain}**")
    databases = list(Database)
    database = st.radio(
        "数据库",
        databases,
        index=databases.index(st.session_state.database),
        format_func=lambda db: f"{db.value}  ·  {DATABASE_PROFILES[db].hint}",
    )
    st.session_state.database = database

    col1, col2 = st.columns(2)
    with col1:
        if st.button("返回"):
            st.session_state.step = STEP_DEFINE_DOMAIN
            st.rerun()
    with col2:
        if st.button("🔎 生成高级检索式", type="primary"):
            st.session_state.step = STEP_RESULT
            run_generation(generator, settings)
            st.rerun()


def render_result(generator: SearchStringGenerator, settings: ApiSettings) -> None:
    database = st.session_state.database
    st.subheader("3. 生成结果")

    if st.session_state.query_error:
        st.error(st.session_state.query_error)
        if st.button("🔄 重试"):
            run_generation(generator, settings)
            st.rerun()
    else:
        st.markdown(f"**{database.value} 高级检索式**")
        # st.code にはコピーボタンが付いている
        st.code(st.session_state.query, language="text")
        st.link_button(f"前往 {database.value}", DATABASE_PROFILES[database].search_url)

    if st.button("重新开始"):
        st.session_state.step = STEP_DEFINE_DOMAIN
        st.session_state.query = ""
        st.session_state.query_error = ""
        st.rerun()


def main():
    st.title("🔎 学术检索生成器")
    st.markdown("智能生成适用于 PubMed、Scopus、CNKI 和 Web of Science 的高级检索式。")

    try:
        config = load_config()
    except ConfigError as e:
        st.error(f"读取配置文件时出错: {e}")
        return

    setup_logging(LOG_DIR, level=config.logging.level)
    init_state()
    settings = render_settings(config)
    generator = get_generator(config.request_timeout)

    st.progress(st.session_state.step / STEP_RESULT, text=f"步骤 {st.session_state.step} / {STEP_RESULT}")

    if st.session_state.step == STEP_DEFINE_DOMAIN:
        render_define_domain(generator, settings)
    elif st.session_state.step == STEP_SELECT_DB:
        render_select_database(generator, settings)
    else:
        render_result(generator, settings)


if __name__ == "__main__":
    main()
