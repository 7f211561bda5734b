import json
import logging
import os
import sys

from dotenv import load_dotenv

# config.json lives in the project root, next to the app/ directory
CONFIG_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'config.json')

DEFAULT_SCAN_LIMIT = 50

DEFAULT_CONFIG = {
    'aws': {
        'region': 'us-east-1',
        'endpoint_url': None,
        'scan_limit': DEFAULT_SCAN_LIMIT,
    },
    'logging': {
        'level': 'INFO',
        'file': None,
    },
}


def load_config(path=CONFIG_PATH):
    """
    Load config.json (if present) on top of the defaults, then apply environment overrides.
    Environment variables can also come from a .env file.
    """
    load_dotenv()

    config = {section: dict(values) for section, values in DEFAULT_CONFIG.items()}
    if os.path.exists(path):
        with open(path, 'r') as f:
            file_config = json.load(f)
        for section, values in file_config.items():
            config.setdefault(section, {}).update(values)

    aws = config['aws']
    aws['region'] = os.getenv('AWS_REGION') or os.getenv('AWS_DEFAULT_REGION') or aws['region']
    aws['endpoint_url'] = os.getenv('DYNAMODB_ENDPOINT_URL') or aws.get('endpoint_url')
    if os.getenv('SCAN_LIMIT'):
        aws['scan_limit'] = int(os.getenv('SCAN_LIMIT'))
    if os.getenv('LOG_LEVEL'):
        config['logging']['level'] = os.getenv('LOG_LEVEL')

    return config


def configure_logging(config):
    log_config = config.get('logging', {})
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_config.get('file'):
        handlers.append(logging.FileHandler(log_config['file']))

    logging.basicConfig(
        level=getattr(logging, str(log_config.get('level', 'INFO')).upper(), logging.INFO),
        format='%(asctime)s [%(levelname)s] %(message)s',
        handlers=handlers,
    )
