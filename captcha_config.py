"""
Configuration settings for the CAPTCHA reading pipeline.
Centralized configuration for all stages.
"""

import logging


class PipelineConfig:
    """Configuration for the entire CAPTCHA reading pipeline."""

    # Output vocabulary, indexed by classifier class
    ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"

    # Image and character-cell geometry
    GEOMETRY = {
        'HEIGHT': 40,
        'WIDTH': 200,
        'CHANNELS': 4,
        'NUM_BLOCKS': 6,
        'BLOCK': {
            'HEIGHT': 22,
            'WIDTH': 24
        },
        'PITCH': 25,
        'X_MARGIN': 2,
        'Y_OFFSET': 8,
        'BASELINE_SHIFT': 5
    }

    # Pretrained linear classifier
    MODEL = {
        'NUM_FEATURES': 22 * 24,
        'NUM_CLASSES': 33,
        'RESOURCE_PACKAGE': 'captcha_stages',
        'RESOURCE_DIR': 'data',
        'RESOURCE_NAME': 'weights.json',
        'PATH_ENV_VAR': 'CAPTCHA_MODEL_PATH'
    }

    # Logging
    LOGGING = {
        'LOGGER_NAMES': ['captcha_pipeline', 'captcha_stages'],
        'LEVEL': logging.INFO,
        'FORMAT': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'DATEFMT': '%Y-%m-%d %H:%M:%S',
        'MAX_BYTES': 10 * 1024 * 1024,
        'BACKUP_COUNT': 5
    }

    # Image files picked up when a directory is passed to the CLI
    IMAGE_EXTENSIONS = ['*.jpg', '*.jpeg', '*.png', '*.JPG', '*.JPEG', '*.PNG']
