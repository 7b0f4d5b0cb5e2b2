#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from token_reconciler.config.loader import ConfigLoader
from token_reconciler.errors import ConfigurationError


def main():
    """Main validation function."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)

    print(f"🔍 Validating token reconciler configuration in {loader.config_dir}...")

    try:
        config = loader.load()
    except ConfigurationError as e:
        print(f"❌ Found {len(e.errors) or 1} validation errors:")
        for error in e.errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        if not e.errors:
            print(f"  • {e}")
        sys.exit(1)

    windows = config.windows
    print(f"✅ Windows: secure_assume={windows.secure_assume_ms}ms "
          f"retain={windows.legacy_retain_ms}ms suppress={windows.legacy_suppress_ms}ms")
    print(f"✅ Keys: secret={config.keys.secret_key} setting={config.keys.setting_key}")
    print(f"✅ Wait: timeout={config.wait.timeout_ms}ms poll={config.wait.poll_ms}ms")
    print(f"\n🎉 Configuration validation passed!")
    sys.exit(0)


if __name__ == "__main__":
    main()
