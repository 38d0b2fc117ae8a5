#!/usr/bin/env python3
"""
Configuration Validation Script
Validates that all required environment variables are set correctly
"""
import os
import sys
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

def validate_config():
    """Validate configuration"""
    print("Validating configuration...\n")

    errors = []
    warnings = []

    # Check database
    database_url = os.getenv('DATABASE_URL', 'sqlite:///./sheet_analytics.db')
    print(f"DATABASE_URL: {database_url.split('@')[-1]}")
    if not database_url.startswith('sqlite'):
        warnings.append("Non-SQLite DATABASE_URL: make sure the driver is installed")

    # Check upload directory
    upload_dir = Path(os.getenv('UPLOAD_DIR', './uploads'))
    if not upload_dir.exists():
        warnings.append(f"Upload directory {upload_dir} does not exist; will be created on start.")
    elif not os.access(upload_dir, os.W_OK):
        errors.append(f"Upload directory {upload_dir} is not writable")
    else:
        print("Upload directory is writable")

    max_size = os.getenv('MAX_UPLOAD_SIZE_MB', '10')
    try:
        if int(max_size) <= 0:
            errors.append(f"MAX_UPLOAD_SIZE_MB must be positive. Got: {max_size}")
        else:
            print(f"MAX_UPLOAD_SIZE_MB: {max_size}")
    except ValueError:
        errors.append(f"MAX_UPLOAD_SIZE_MB must be an integer. Got: {max_size}")

    ai_provider = os.getenv('AI_PROVIDER', 'openai')
    print("AI_PROVIDER:", ai_provider)

    if ai_provider == 'openai':
        api_key = os.getenv('OPENAI_API_KEY')
        if not api_key or api_key == 'your-openai-api-key':
            warnings.append("OPENAI_API_KEY not set (chart insights disabled)")
        else:
            print("OPENAI_API_KEY is set")
    elif ai_provider == 'azure':
        if not os.getenv('AZURE_OPENAI_ENDPOINT') or not os.getenv('AZURE_OPENAI_KEY'):
            warnings.append("AZURE_OPENAI_ENDPOINT / AZURE_OPENAI_KEY not set (chart insights disabled)")
        else:
            print("Azure OpenAI credentials are set")
        if not os.getenv('AZURE_OPENAI_DEPLOYMENT'):
            warnings.append("AZURE_OPENAI_DEPLOYMENT not set; INSIGHT_MODEL will be used")
    elif ai_provider == 'none':
        print("Chart insights disabled")
    else:
        errors.append(f"AI_PROVIDER must be one of openai, azure, none. Got: {ai_provider}")
    print("\n" + "="*60)
    if warnings:
        print("\nWARNINGS:")
        for w in warnings:
            print(" ", w)
    if errors:
        print("\nERRORS:")
        for e in errors:
            print(" ", e)
        print("\nValidation failed. Fix errors above.\n")
        return False
    print("\nValidation passed.\n")
    return True

if __name__ == "__main__":
    success = validate_config()
    sys.exit(0 if success else 1)
