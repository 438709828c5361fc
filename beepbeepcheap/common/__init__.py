# Common utilities
from .config_loader import (
    load_config,
    load_extraction_rules,
    load_identity_words,
    load_settings,
    load_store_profiles,
)
from .log_config import setup_logging
from .text_utils import clean_price, clean_text, is_valid_price, slug_to_title
