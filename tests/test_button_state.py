from __future__ import annotations

import asyncio

from conftest import FakeSurface

from ampmon.remote.button_state import ButtonState, ButtonStateReconciler
from ampmon.remote.page_surface import SerializedSurface


def _reconciler(fake: FakeSurface) -> ButtonStateReconciler:
    return ButtonStateReconciler(SerializedSurface(fake))


def test_only_standby_button_present() -> None:
    state = asyncio.run(_reconciler(FakeSurface(buttons=["STANDBY", "TUNE"])).reconcile())
    assert state == ButtonState(standby="STANDBY", bypass="", power="")


def test_all_buttons_found() -> None:
    fake = FakeSurface(buttons=[" OPERATE ", "TUNE", "ATU BYPASS", "POWER OFF"], quote_results=True)
    state = asyncio.run(_reconciler(fake).reconcile())
    assert state == ButtonState(standby="OPERATE", bypass="ATU BYPASS", power="POWER OFF")


def test_label_predicates_are_exact_where_required() -> None:
    fake = FakeSurface(buttons=["STANDBY MODE", "POWER"])
    state = asyncio.run(_reconciler(fake).reconcile())
    assert state == ButtonState()


def test_missing_caption_keeps_previous_value() -> None:
    fake = FakeSurface(buttons=["OPERATE", "BYPASS", "POWER ON"])
    reconciler = _reconciler(fake)

    async def scenario() -> ButtonState | None:
        await reconciler.reconcile()
        fake.buttons = ["STANDBY"]
        return await reconciler.reconcile()

    state = asyncio.run(scenario())
    assert state == ButtonState(standby="STANDBY")
    assert reconciler.current == ButtonState(standby="STANDBY", bypass="BYPASS", power="POWER ON")


def test_failures_yield_no_update() -> None:
    fake = FakeSurface(buttons=["OPERATE"])
    reconciler = _reconciler(fake)
    fake.fail_with = RuntimeError("boom")
    assert asyncio.run(reconciler.reconcile()) is None
    assert reconciler.current == ButtonState()


def test_not_ready_yields_no_update() -> None:
    fake = FakeSurface(buttons=["OPERATE"], ready=False)
    assert asyncio.run(_reconciler(fake).reconcile()) is None
    assert fake.scripts == []


def test_malformed_json_yields_no_update() -> None:
    class BrokenSurface(FakeSurface):
        async def run_query(self, script: str):
            return "{oops"

    assert asyncio.run(_reconciler(BrokenSurface()).reconcile()) is None
