"""Реестр подключений."""

from duelroom.registry import ConnectionRegistry


class TestConnectionRegistry:
    def test_bind_is_idempotent(self):
        reg = ConnectionRegistry()
        reg.bind("a")
        reg.assign("a", "room")
        reg.bind("a")

        assert reg.locate("a") == "room"
        assert len(reg) == 1

    def test_locate_unknown_is_none(self):
        assert ConnectionRegistry().locate("ghost") is None

    def test_unbind_forgets_session(self):
        reg = ConnectionRegistry()
        reg.bind("a")
        reg.assign("a", "room")
        reg.unbind("a")
        reg.unbind("a")

        assert reg.locate("a") is None
        assert not reg.is_bound("a")

    def test_assign_ignores_unbound(self):
        reg = ConnectionRegistry()
        reg.assign("ghost", "room")

        assert not reg.is_bound("ghost")
        assert reg.locate("ghost") is None

    def test_release_keeps_binding(self):
        reg = ConnectionRegistry()
        reg.bind("a")
        reg.assign("a", "room")
        reg.release("a")

        assert reg.is_bound("a")
        assert not reg.is_seated("a")

