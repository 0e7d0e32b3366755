"""Tests for combine(), combine2..combine5 and computed()."""

import pytest

from reactbox import (
    DisposedError,
    NullableObservable,
    Observable,
    combine,
    combine2,
    combine3,
    combine4,
    combine5,
    computed,
)


class TestCombine:
    def test_initial_value(self):
        a, b, c = Observable(1), Observable(2), Observable(3)
        total = combine([a, b, c], sum)
        assert total.value == 6

    def test_recomputes_on_any_source(self):
        a, b = Observable(1), Observable(2)
        total = combine([a, b], sum)
        a.set(10)
        assert total.value == 12
        b.set(20)
        assert total.value == 30

    def test_fn_gets_values_in_source_order(self):
        a, b = Observable("x"), Observable("y")
        seen = []
        combine([a, b], lambda vs: seen.append(list(vs)))
        a.set("z")
        assert seen == [["x", "y"], ["z", "y"]]

    def test_empty_sources_rejected(self):
        with pytest.raises(ValueError):
            combine([], sum)

    def test_initial_fn_error_propagates(self):
        a = Observable(0)
        with pytest.raises(ZeroDivisionError):
            combine([a], lambda vs: 1 / vs[0])

    def test_fn_error_on_change_propagates_to_setter(self):
        a = Observable(1)
        other = []
        derived = combine([a], lambda vs: 1 / vs[0])
        a.listen(other.append)
        with pytest.raises(ZeroDivisionError):
            a.set(0)
        # remaining listeners still ran
        assert other == [0]
        assert derived.value == 1

    def test_derived_respects_its_strict_policy(self):
        a = Observable(1)
        parity = combine([a], lambda vs: vs[0] % 2)
        log = []
        parity.listen(log.append)
        a.set(3)
        assert log == []
        a.set(4)
        assert log == [0]

    def test_non_strict_derived(self):
        a = Observable(1)
        parity = combine([a], lambda vs: vs[0] % 2, strict=False)
        log = []
        parity.listen(log.append)
        a.set(3)
        assert log == [1]

    def test_cascade_completes_before_set_returns(self):
        a = Observable(1)
        b = combine([a], lambda vs: vs[0] * 2)
        c = combine([b], lambda vs: vs[0] + 1)
        log = []
        c.listen(log.append)
        a.set(5)
        assert (b.value, c.value) == (10, 11)
        assert log == [11]

    def test_two_source_changes_are_two_cascades(self):
        a, b = Observable(1), Observable(2)
        total = combine([a, b], sum)
        log = []
        total.listen(log.append)
        a.set(2)
        b.set(3)
        assert log == [4, 5]

    def test_derived_can_be_bound(self):
        a = Observable(1)
        doubled = combine([a], lambda vs: vs[0] * 2)

        class W:
            is_attached = True
            refreshes = 0

            def refresh(self):
                self.refreshes += 1

        w = W()
        doubled.bind(w)
        a.set(2)
        assert w.refreshes == 2
        assert doubled.value == 4

    def test_dispose_detaches_from_sources(self):
        a, b = Observable(1), Observable(2)
        total = combine([a, b], sum)
        assert len(a._listeners) == 1
        total.dispose()
        assert a._listeners == []
        assert b._listeners == []
        a.set(100)
        assert total.value == 3

    def test_disposed_source_rejected_without_side_effects(self):
        a, b = Observable(1), Observable(2)
        b.dispose()
        calls = []
        with pytest.raises(DisposedError):
            combine([a, b], lambda vs: calls.append(vs))
        assert a._listeners == []
        assert calls == []

    def test_same_source_twice(self):
        a = Observable(2)
        square = combine([a, a], lambda vs: vs[0] * vs[1])
        a.set(3)
        assert square.value == 9
        square.dispose()
        assert a._listeners == []

    def test_nullable_source(self):
        name = NullableObservable()
        greeting = combine([name], lambda vs: f"Hi {vs[0] or 'stranger'}")
        assert greeting.value == "Hi stranger"
        name.set("Ada")
        assert greeting.value == "Hi Ada"


class TestFixedArity:
    def test_combine2_scenario(self):
        a, b = Observable(1), Observable(2)
        total = combine2(a, b, lambda x, y: x + y)
        assert total.value == 3
        a.set(3)
        assert total.value == 5
        b.set(4)
        assert total.value == 7

    def test_combine2_only_one_source_changes(self):
        a, b = Observable(1), Observable(10)
        diff = combine2(a, b, lambda x, y: y - x)
        a.set(4)
        assert diff.value == 6

    def test_combine3_status_line(self):
        active = Observable(True)
        count = Observable(0)
        message = NullableObservable()
        status = combine3(
            active,
            count,
            message,
            lambda on, n, msg: f"{'on' if on else 'off'}:{n}:{msg}",
        )
        assert status.value == "on:0:None"
        active.set(False)
        count.set(10)
        message.set("hello")
        assert status.value == "off:10:hello"

    def test_combine4(self):
        obs = [Observable(i) for i in range(4)]
        joined = combine4(*obs, lambda a, b, c, d: (a, b, c, d))
        obs[3].set(9)
        assert joined.value == (0, 1, 2, 9)

    def test_combine5(self):
        obs = [Observable(i) for i in range(5)]
        total = combine5(*obs, lambda a, b, c, d, e: a + b + c + d + e)
        assert total.value == 10
        obs[0].set(5)
        assert total.value == 15

    def test_fixed_arity_forwards_strict(self):
        a, b = Observable(1), Observable(2)
        obs = [Observable(i) for i in range(5)]
        derived = [
            combine2(a, b, lambda x, y: 0, strict=False),
            combine3(a, b, a, lambda x, y, z: 0, strict=False),
            combine4(*obs[:4], lambda *vs: 0, strict=False),
            combine5(*obs, lambda *vs: 0, strict=False),
        ]
        assert [d.strict for d in derived] == [False] * 4
        log = []
        derived[0].listen(log.append)
        a.set(5)
        assert log == [0]
        assert combine2(a, b, lambda x, y: 0).strict is True


class TestComputed:
    def test_default_republishes_tuple(self):
        a, b = Observable(1), Observable("x")
        pair = computed([a, b])
        assert pair.value == (1, "x")
        b.set("y")
        assert pair.value == (1, "y")

    def test_fires_on_any_source(self):
        a, b = Observable(1), Observable(2)
        pair = computed([a, b])
        log = []
        pair.listen(log.append)
        a.set(5)
        b.set(6)
        assert log == [(5, 2), (5, 6)]

    def test_custom_fn_gets_tuple(self):
        a, b = Observable(2), Observable(3)
        product = computed([a, b], lambda vs: vs[0] * vs[1])
        assert product.value == 6

    def test_empty_sources_rejected(self):
        with pytest.raises(ValueError):
            computed([])
