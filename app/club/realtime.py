"""
Snapshot subscriptions

Each collection (players, coaches, payments, events) of a team publishes
full snapshots whenever it changes. Snapshots are filed per
(team_id, collection), so subscribers only ever see their own team.
Consumers hold an explicit Subscription and unsubscribe on teardown;
derived views are recomputed from the latest snapshots.
"""
from collections import defaultdict, deque
from typing import Any, Callable, Deque, Dict, Iterator, List, Optional, Tuple

from loguru import logger

from .dependencies import ClubContext
from .models import Leaderboards
from .stats import build_leaderboards

Snapshot = List[Any]
SnapshotCallback = Callable[[Snapshot], None]
Topic = Tuple[str, str]  # (team_id, collection)


class Subscription:
    """
    Stream of snapshots for one team collection

    Without a callback every snapshot is buffered until drained.
    With a callback only the most recent one is kept.
    """

    def __init__(
        self,
        hub: "SnapshotHub",
        team_id: str,
        collection: str,
        callback: Optional[SnapshotCallback] = None
    ):
        self.hub = hub
        self.team_id = team_id
        self.collection = collection
        self.callback = callback
        self.active = True
        self._pending: Deque[Snapshot] = deque(maxlen=1 if callback else None)

    @property
    def topic(self) -> Topic:
        return (self.team_id, self.collection)

    def _deliver(self, snapshot: Snapshot) -> None:
        if not self.active:
            return
        self._pending.append(snapshot)
        if self.callback:
            self.callback(snapshot)

    def __iter__(self) -> Iterator[Snapshot]:
        """Drain pending snapshots (oldest first)"""
        while self._pending:
            yield self._pending.popleft()

    def __len__(self) -> int:
        return len(self._pending)

    def latest(self) -> Optional[Snapshot]:
        """Most recent snapshot, discarding older pending ones"""
        snapshot = None
        for snapshot in self:
            pass
        return snapshot

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._pending.clear()
            self.hub._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unsubscribe()


class SnapshotHub:
    """Publishes team collection snapshots to subscribers"""

    def __init__(self):
        self._subscribers: Dict[Topic, List[Subscription]] = defaultdict(list)
        self._latest: Dict[Topic, Snapshot] = {}

    def subscribe(
        self,
        team_id: str,
        collection: str,
        callback: Optional[SnapshotCallback] = None
    ) -> Subscription:
        """Subscribe; the team's current snapshot (if any) is delivered right away"""
        subscription = Subscription(self, team_id, collection, callback)
        self._subscribers[subscription.topic].append(subscription)
        logger.debug(f"[{team_id}] Subscribed to {collection}")

        if subscription.topic in self._latest:
            self._notify(subscription, self._latest[subscription.topic])
        return subscription

    def publish(self, team_id: str, collection: str, snapshot: Snapshot) -> None:
        topic = (team_id, collection)
        snapshot = list(snapshot)
        self._latest[topic] = snapshot
        logger.debug(f"[{team_id}] Snapshot published: {collection} ({len(snapshot)} records)")
        for subscription in list(self._subscribers.get(topic, [])):
            self._notify(subscription, snapshot)

    def latest(self, team_id: str, collection: str) -> Optional[Snapshot]:
        return self._latest.get((team_id, collection))

    def subscriber_count(self, team_id: str, collection: str) -> int:
        return len(self._subscribers.get((team_id, collection), []))

    def _notify(self, subscription: Subscription, snapshot: Snapshot) -> None:
        try:
            subscription._deliver(snapshot)
        except Exception as e:
            logger.error(f"Snapshot callback failed {subscription.topic}: {e}")

    def _remove(self, subscription: Subscription) -> None:
        subscribers = self._subscribers.get(subscription.topic, [])
        if subscription in subscribers:
            subscribers.remove(subscription)
            logger.debug(f"[{subscription.team_id}] Unsubscribed from {subscription.collection}")


class LeaderboardFeed:
    """Leaderboards of one team kept current from its players and events snapshots"""

    def __init__(self, hub: SnapshotHub, ctx: ClubContext):
        self.ctx = ctx
        self.players: Snapshot = []
        self.events: Snapshot = []
        self.leaderboards: Leaderboards = build_leaderboards(ctx, [], [])
        self.recomputations = 0

        self._subscriptions = [
            hub.subscribe(ctx.team_id, "players", self._on_players),
            hub.subscribe(ctx.team_id, "events", self._on_events),
        ]

    @property
    def subscriptions(self) -> List[Subscription]:
        return list(self._subscriptions)

    def _on_players(self, snapshot: Snapshot) -> None:
        self.players = snapshot
        self._recompute()

    def _on_events(self, snapshot: Snapshot) -> None:
        self.events = snapshot
        self._recompute()

    def _recompute(self) -> None:
        self.leaderboards = build_leaderboards(self.ctx, self.events, self.players)
        self.recomputations += 1

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []
