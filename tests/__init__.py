# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Salon Site API:
# - test_resources.py: Field schemas of the editable tables
# - test_resource_editor.py: Load / draft / submit / remove cycle
# - test_image_service.py: Image upload and release
# - test_page_service.py: Public page rendering and fallbacks
# - test_notifications.py: Notification channel
# - test_session_gate.py: Session state machine and admin gate
# - test_api.py: HTTP and WebSocket endpoints
#
# Run tests with: pytest
# =============================================================================
