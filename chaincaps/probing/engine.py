"""
Probe Engine
============
Fans out one probe task per (chain, capability) pair and merges each
outcome into the ResultStore as soon as it lands.

Every task is scheduled immediately: no ordering between pairs, no
retries, no cancellation. `max_concurrency` optionally bounds the number
of probes in flight; by default the fan-out is unbounded, which is only
reasonable for registries of a few hundred chains.
"""

import asyncio
from typing import Callable, Dict, Iterable, List, Optional

from chaincaps.probing.checks import CapabilityCheck
from chaincaps.probing.result_store import ResultStore
from chaincaps.shared.models import CapabilityId, ChainDescriptor, Outcome
from chaincaps.shared.system.logging import Logger


ResultCallback = Callable[[ChainDescriptor, CapabilityId, Outcome], None]


class ProbeEngine:
    """
    One-shot probing session over a ResultStore.

    Usage:
        store = ResultStore()
        engine = ProbeEngine(store)
        await engine.run(chains, build_checks())
        store.snapshot()

    Or, to observe progress:
        done = engine.start(chains, checks)   # returns immediately
        while not engine.settled.is_set(): ...
        await done
    """

    def __init__(
        self,
        store: ResultStore,
        max_concurrency: Optional[int] = None,
        on_result: Optional[ResultCallback] = None,
    ):
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1 or None")
        self.store = store
        self.max_concurrency = max_concurrency
        self.on_result = on_result

        self._semaphore: Optional[asyncio.Semaphore] = None
        self._tasks: List[asyncio.Task] = []
        self._pending = 0
        self._settled: Optional[asyncio.Event] = None

    @property
    def pending(self) -> int:
        """Probes launched but not yet merged."""
        return self._pending

    @property
    def settled(self) -> asyncio.Event:
        """Set once every probe has merged its outcome."""
        if self._settled is None:
            raise RuntimeError("ProbeEngine has not been started")
        return self._settled

    def start(
        self,
        registry: Iterable[ChainDescriptor],
        checks: Dict[CapabilityId, CapabilityCheck],
    ) -> "asyncio.Future[None]":
        """
        Initialize the store and schedule every probe.

        Must be called from a running event loop. Returns a future that
        resolves once all probes have merged.
        """
        chains = list(registry)
        self.store.initialize(chains, checks.keys())

        self._settled = asyncio.Event()
        if self.max_concurrency is not None:
            self._semaphore = asyncio.Semaphore(self.max_concurrency)

        self._pending = len(chains) * len(checks)
        cap_note = f"max {self.max_concurrency} in flight" if self.max_concurrency else "unbounded"
        Logger.info(f"[PROBE] Launching {self._pending} probes ({len(chains)} chains x {len(checks)} checks, {cap_note})")

        if self._pending == 0:
            self._settled.set()

        for chain in chains:
            for capability_id, check in checks.items():
                task = asyncio.create_task(
                    self._probe(chain, capability_id, check),
                    name=f"probe:{chain.id}:{capability_id.value}",
                )
                self._tasks.append(task)

        return asyncio.gather(*self._tasks)

    async def run(
        self,
        registry: Iterable[ChainDescriptor],
        checks: Dict[CapabilityId, CapabilityCheck],
    ) -> None:
        """Probe everything and return once all outcomes are merged."""
        await self.start(registry, checks)

    async def _probe(self, chain: ChainDescriptor, capability_id: CapabilityId, check: CapabilityCheck) -> None:
        if self._semaphore is not None:
            async with self._semaphore:
                outcome = await self._execute(chain, capability_id, check)
        else:
            outcome = await self._execute(chain, capability_id, check)

        self.store.merge(chain.id, capability_id, outcome)
        self._pending -= 1

        Logger.debug(f"[PROBE] {chain.name} ({chain.id}) {capability_id.value}: {outcome!r}")

        if self.on_result is not None:
            try:
                self.on_result(chain, capability_id, outcome)
            except Exception as e:
                Logger.error(f"[PROBE] on_result callback failed: {e}")

        if self._pending == 0:
            Logger.success("[PROBE] All probes settled")
            self._settled.set()

    async def _execute(self, chain: ChainDescriptor, capability_id: CapabilityId, check: CapabilityCheck) -> Outcome:
        """Run one check, holding it to its never-raise / terminal-outcome contract."""
        try:
            outcome = await check(chain)
        except Exception as e:
            Logger.error(f"[PROBE] {capability_id.value} check raised for {chain.name}: {e}")
            return Outcome.failed(f"{type(e).__name__}: {e}")

        if not isinstance(outcome, Outcome) or outcome.is_pending:
            return Outcome.failed(f"Check returned no verdict: {outcome!r}")
        return outcome
