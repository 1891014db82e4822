"""
Logging configuration for the driver lifetime value analysis
Easy switching between different logging modes
"""

# =============================================================================
# LOGGING CONFIGURATIONS
# =============================================================================

# Production mode - minimal logging
PRODUCTION_LOGGING = {
    'log_level': 'WARNING',
    'enable_console': True,
    'enable_file': False,
    'log_format': 'minimal'
}

# Development mode - standard logging
DEVELOPMENT_LOGGING = {
    'log_level': 'INFO',
    'enable_console': True,
    'enable_file': False,
    'log_format': 'simple'
}

# Debug mode - detailed logging
DEBUG_LOGGING = {
    'log_level': 'DEBUG',
    'enable_console': True,
    'enable_file': True,
    'log_format': 'detailed'
}

# Silent mode - no logging
SILENT_LOGGING = {
    'log_level': 'CRITICAL',
    'enable_console': False,
    'enable_file': False,
    'log_format': 'minimal'
}

# Testing mode - file only logging
TESTING_LOGGING = {
    'log_level': 'DEBUG',
    'enable_console': False,
    'enable_file': True,
    'log_format': 'detailed'
}

# =============================================================================
# QUICK SWITCHES
# =============================================================================

# Change this to switch logging modes
CURRENT_LOGGING_MODE = 'DEVELOPMENT'  # Options: PRODUCTION, DEVELOPMENT, DEBUG, SILENT, TESTING

LOGGING_MODES = {
    'PRODUCTION': PRODUCTION_LOGGING,
    'DEVELOPMENT': DEVELOPMENT_LOGGING,
    'DEBUG': DEBUG_LOGGING,
    'SILENT': SILENT_LOGGING,
    'TESTING': TESTING_LOGGING
}

# =============================================================================
# LOG FILE SETTINGS
# =============================================================================

LOG_DIR = "debug_logs"

# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def get_logging_config(mode: str = None) -> dict:
    """Get logging configuration for specified mode"""
    if mode is None:
        mode = CURRENT_LOGGING_MODE

    config = dict(LOGGING_MODES.get(mode.upper(), DEVELOPMENT_LOGGING))
    config['log_dir'] = LOG_DIR
    return config
