# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the CineThread API:
# - test_models.py: Pydantic model validation and wire format
# - test_comment_service.py / test_contact_service.py: Service logic
# - test_supabase_client.py: Query building against a mocked client
# - test_room_manager.py / test_broadcast.py: Realtime rooms and relay
# - test_api.py: HTTP and WebSocket endpoints through TestClient
#
# Run tests with: pytest
# =============================================================================
