from prometheus_client import Counter, Histogram


class OrderingMetrics:
    """
    Booking lifecycle metrics

    Outcomes of the synchronous create-and-wait call, vendor decisions and
    status transitions, exposed on /metrics.
    """

    def __init__(self):
        self.booking_outcomes = Counter(
            'booking_outcomes_total',
            'Terminal outcome of booking creation (accepted/rejected/timeout)',
            ['status'],
        )

        self.vendor_wait_duration = Histogram(
            'booking_vendor_wait_seconds',
            'Time a booking request waited for the vendor decision',
            ['status'],
            buckets=[1.0, 5.0, 10.0, 30.0, 60.0, 90.0, 120.0, 180.0],
        )

        self.status_transitions = Counter(
            'booking_status_transitions_total',
            'Vendor driven order status transitions',
            ['to_status'],
        )

        self.coupon_rejections = Counter(
            'booking_coupon_rejections_total',
            'Bookings refused because the applied coupon no longer validated',
        )

    def record_booking_outcome(self, *, status: str, waited_seconds: float) -> None:
        self.booking_outcomes.labels(status=status).inc()
        self.vendor_wait_duration.labels(status=status).observe(waited_seconds)

    def record_status_transition(self, *, to_status: str) -> None:
        self.status_transitions.labels(to_status=to_status).inc()

    def record_coupon_rejection(self) -> None:
        self.coupon_rejections.inc()


# Global metrics instance
metrics = OrderingMetrics()
