# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the LinkBio API:
# - test_ordering.py / test_journal.py: pure draft and commit planning logic
# - test_*_service.py: services against the in-memory FakeSupabase
# - test_public_page.py: public page projection
# - test_models.py: Pydantic model validation
# - test_api.py: HTTP routes through TestClient
#
# Run tests with: pytest
# =============================================================================
