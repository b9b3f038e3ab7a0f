import threading
import time

from models import Coupon, HookNotRegistered

SEED_PRODUCTS = [
    ("Gala Apples", "$0.50 off"),
    ("Whole Wheat Bread", "$1.00 off"),
    ("Large Eggs", "$0.75 off"),
    ("Almond Milk", "$1.25 off"),
    ("Greek Yogurt", "$0.40 off"),
    ("Chicken Breast", "$2.00 off"),
]

CLIP_NOTICE_SECONDS = 2.0
BULK_NOTICE_SECONDS = 3.0


def seed_coupons():
    return [
        Coupon(
            id=i + 1,
            product=product,
            discount=discount,
            image=f"https://picsum.photos/seed/grocery{i}/150/150",
        )
        for i, (product, discount) in enumerate(SEED_PRODUCTS)
    ]


class DemoPlayground:
    """Look-alike coupon grid for trying generated scripts."""

    def __init__(self, clock=time.monotonic):
        self.clock = clock
        self.coupons = seed_coupons()
        self._notice = None
        self._lock = threading.Lock()

    def _index(self, coupon_id):
        for i, c in enumerate(self.coupons):
            if c.id == coupon_id:
                return i
        raise KeyError(coupon_id)

    def _notify(self, text, seconds):
        self._notice = (text, self.clock() + seconds)

    def _current_notice(self):
        # caller holds self._lock
        if self._notice is None:
            return None, 0
        text, expires = self._notice
        remaining = expires - self.clock()
        if remaining <= 0:
            self._notice = None
            return None, 0
        return text, round(remaining, 2)

    @property
    def notification(self):
        with self._lock:
            return self._current_notice()[0]

    def clip(self, coupon_id):
        with self._lock:
            i = self._index(coupon_id)
            coupon = self.coupons[i]
            if coupon.is_clipped:
                return False
            self.coupons[i] = coupon.clipped()
            self._notify(f"Clipped {coupon.product}!", CLIP_NOTICE_SECONDS)
            return True

    def reset_all(self):
        with self._lock:
            self.coupons = [c.clipped(False) for c in self.coupons]

    def clip_all(self):
        with self._lock:
            count = sum(1 for c in self.coupons if not c.is_clipped)
            self.coupons = [c.clipped() for c in self.coupons]
            self._notify(f"Auto-clipped {count} coupons!", BULK_NOTICE_SECONDS)
            return count

    def to_dict(self):
        with self._lock:
            coupons = [c.to_dict() for c in self.coupons]
            text, ttl = self._current_notice()
        return {"coupons": coupons, "notification": text, "notification_ttl": ttl}


class HookRegistry:
    """Bulk-clip hooks, one per mounted playground.

    A console script can only reach a playground through ``invoke`` while that
    playground is registered; after teardown the call is refused.
    """

    def __init__(self):
        self._hooks = {}
        self._lock = threading.Lock()

    def register(self, view_id, playground):
        with self._lock:
            self._hooks[view_id] = playground.clip_all

    def deregister(self, view_id):
        with self._lock:
            self._hooks.pop(view_id, None)

    def is_registered(self, view_id):
        with self._lock:
            return view_id in self._hooks

    def invoke(self, view_id):
        with self._lock:
            hook = self._hooks.get(view_id)
        if hook is None:
            raise HookNotRegistered(f"No playground mounted for view {view_id}")
        return hook()
