from ..infrastructure.app_factory import create_application
from ..infrastructure.config.settings import get_settings
from ..interfaces.api import router as api_router

settings = get_settings()

app = create_application(
    router=api_router,
    settings=settings,
    summary="Chat with your PDFs, generate quizzes and track study progress",
    description="""
    # Study Notebook API

    * 📚 **Notebooks**: Organize uploaded PDFs into notebooks
    * 🔍 **Retrieval-augmented chat**: Answers grounded on the selected documents, with page citations
    * 📝 **Quizzes**: Multiple choice, short and long answer questions generated from your documents
    * 📈 **Progress**: Quiz history and statistics per notebook
    * 🎬 **Videos**: YouTube searches for the topic you are studying
    """,
)
