class HealthService:
    def health_check(self) -> dict:
        """Liveness only; backends are probed by the test-connection routes."""
        return {
            "success": True,
            "message": "querydesk API is running"
        }
