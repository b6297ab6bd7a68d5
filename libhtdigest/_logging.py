import logging

logger = logging.getLogger("libhtdigest")
