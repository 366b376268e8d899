import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _int_list(value):
    return [int(part) for part in value.split(',') if part.strip()]


def _float_list(value):
    return [float(part) for part in value.split(',') if part.strip()]


class Config:
    # Optimizer Configuration
    TARGET_BYTES = int(os.getenv('TARGET_BYTES', '409600'))  # 400KB
    SERVER_CEILING_BYTES = int(os.getenv('SERVER_CEILING_BYTES', '512000'))  # 500KB, upload endpoint limit
    RESOLUTION_LADDER = _int_list(os.getenv('RESOLUTION_LADDER', '1600,1400,1200'))  # longer edge
    QUALITY_LADDER = _float_list(os.getenv('QUALITY_LADDER', '0.82,0.78,0.74,0.70,0.66'))
    MAX_INPUT_BYTES = int(os.getenv('MAX_INPUT_BYTES', str(20 * 1024 * 1024)))

    # Product Service Configuration
    API_BASE_URL = os.getenv('API_BASE_URL', 'http://localhost')
    PRODUCT_API_PORT = int(os.getenv('PRODUCT_API_PORT', '8082'))
    UPLOAD_DIRECTORY = os.getenv('UPLOAD_DIRECTORY', 'products')
    ACCESS_TOKEN = os.getenv('ACCESS_TOKEN', '')
    UPLOAD_TIMEOUT_SECONDS = int(os.getenv('UPLOAD_TIMEOUT_SECONDS', '30'))

    @staticmethod
    def product_api_base():
        return f"{Config.API_BASE_URL}:{Config.PRODUCT_API_PORT}/api"

    @staticmethod
    def check_optimizer_options(target_bytes, resolution_ladder, quality_ladder, max_input_bytes):
        """Range-check optimizer settings, whether from the environment or passed in"""
        if not resolution_ladder:
            raise ValueError("RESOLUTION_LADDER must list at least one resolution")
        if any(step <= 0 for step in resolution_ladder):
            raise ValueError("RESOLUTION_LADDER values must be positive")
        if not quality_ladder:
            raise ValueError("QUALITY_LADDER must list at least one quality")
        if any(not 0 < q <= 1 for q in quality_ladder):
            raise ValueError("QUALITY_LADDER values must be in (0, 1]")
        if target_bytes <= 0 or max_input_bytes <= 0:
            raise ValueError("TARGET_BYTES and MAX_INPUT_BYTES must be positive")
        if target_bytes > Config.SERVER_CEILING_BYTES:
            raise ValueError("TARGET_BYTES must not exceed SERVER_CEILING_BYTES")

    @staticmethod
    def validate():
        """Validate optimizer configuration"""
        Config.check_optimizer_options(
            Config.TARGET_BYTES,
            Config.RESOLUTION_LADDER,
            Config.QUALITY_LADDER,
            Config.MAX_INPUT_BYTES
        )
        return True

# Validate config on import
try:
    Config.validate()
except ValueError as e:
    print(f"⚠️  Configuration warning: {e}")
