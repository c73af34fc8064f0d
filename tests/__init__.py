"""
ignore-hub test suite
=====================

Test Modules
------------
- test_merge.py: Generated block handling and rule deduplication
- test_resolver.py: Query aliases, matching and issue reporting
- test_classification.py: Template path parsing and kinds
- test_models.py: Pydantic models
- test_config.py: Settings file and environment overrides
- test_github.py: Template tree and raw content requests
- test_cache.py: Index cache and loading policy
- test_detector.py: Project marker detection
- test_generator.py: Non-interactive pipeline
- test_wizard.py: Interactive flow
- test_cli.py: Command-line interface

Running Tests
-------------
    # Run all tests
    pytest

    # Run specific module
    pytest tests/test_merge.py

    # Run specific test class
    pytest tests/test_resolver.py::TestResolveQuery
"""
