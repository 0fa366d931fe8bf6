"""Test runner script."""
import unittest
import sys
from pathlib import Path

# Allow running from a source checkout without installing
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

if __name__ == "__main__":
    loader = unittest.TestLoader()
    start_dir = Path(__file__).parent
    suite = loader.discover(start_dir, pattern="test_*.py")
    
    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)
    
    sys.exit(0 if result.wasSuccessful() else 1)
