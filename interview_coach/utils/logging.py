"""
Logging utilities for the interview coach.
"""
import os
import logging


def setup_logging(log_file_path: str, level: str = "INFO", console_level: int = logging.CRITICAL) -> str:
    """
    Set up logging to file with minimal console output.
    
    Args:
        log_file_path: Full path to the log file
        level: Level name for the file handler (DEBUG, INFO, ...)
        console_level: Level for the console handler
        
    Returns:
        Path to the log file
    """
    workdir = os.path.dirname(log_file_path)
    if workdir:
        os.makedirs(workdir, exist_ok=True)
    
    # Clear any existing handlers
    logging.getLogger().handlers.clear()
    
    file_level = getattr(logging, str(level).upper(), logging.INFO)
    file_handler = logging.FileHandler(log_file_path, mode='w')
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s - %(message)s'))
    
    # Console only gets what the caller asks for (critical by default)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    
    root_logger = logging.getLogger()
    root_logger.setLevel(min(file_level, console_level))
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)
    
    # Third-party HTTP chatter stays out of the file log
    for noisy in ("urllib3", "google.auth", "grpc"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    
    return log_file_path
