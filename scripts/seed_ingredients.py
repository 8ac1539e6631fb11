from __future__ import annotations

from vegmenu.core.config import settings
from vegmenu.core.logging import configure_logging
from vegmenu.rag.seed import seed_knowledge_base

if __name__ == "__main__":
    configure_logging(settings.log_level)
    seed_knowledge_base()
