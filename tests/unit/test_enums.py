from pairwatch.domain.enums import AlertDirection, PayloadShape, StoreMode


class TestEnumsAreStringMixin:
    """All enums use (str, Enum) so they serialize to strings in JSON and DB."""

    def test_alert_direction_is_str(self):
        assert isinstance(AlertDirection.ABOVE, str)
        assert AlertDirection.ABOVE == "ABOVE"
        assert AlertDirection.BELOW == "BELOW"

    def test_store_mode_is_str(self):
        assert isinstance(StoreMode.ENRICHED, str)
        assert StoreMode.DEGRADED == "DEGRADED"

    def test_payload_shape_members(self):
        assert {s.value for s in PayloadShape} == {"EMPTY", "ARRAY", "STRICT", "ALTERNATIVE", "UNRECOGNIZED"}

    def test_direction_from_db_string(self):
        assert AlertDirection("BELOW") is AlertDirection.BELOW
