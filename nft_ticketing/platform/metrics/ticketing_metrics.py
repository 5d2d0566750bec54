from prometheus_client import Counter, Gauge, Histogram


class TicketingMetrics:
    """
    NFT ticketing core metrics

    Tracks the purchase -> mint -> check-in lifecycle, the expiry reaper and
    the latency of calls to the event, blockchain and IPFS services.
    """

    def __init__(self):
        # ========== Purchase Lifecycle Metrics ==========
        self.purchase_requests = Counter(
            'nft_purchase_requests_total',
            'Total purchase initiation requests',
            ['ticket_type_id', 'result'],  # result: success/sold_out/seat_taken/error
        )

        self.purchase_duration = Histogram(
            'nft_purchase_duration_seconds',
            'Purchase initiation processing time',
            ['ticket_type_id'],
            buckets=[0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0, 10.0],
        )

        self.purchase_confirmations = Counter(
            'nft_purchase_confirmations_total',
            'Payment confirmations by outcome',
            ['result'],  # result: confirmed/idempotent/rejected/error
        )

        self.tickets_minted = Counter(
            'nft_tickets_minted_total', 'Tickets moved to MINTED', ['event_id']
        )

        self.ticket_availability = Gauge(
            'nft_ticket_type_available',
            'Recomputed available quantity per ticket type',
            ['ticket_type_id'],
        )

        # ========== Check-in Metrics ==========
        self.check_ins = Counter(
            'nft_check_ins_total',
            'Check-in attempts by outcome',
            ['result'],  # result: success/rejected
        )

        self.qr_codes_issued = Counter(
            'nft_qr_codes_issued_total', 'Check-in credentials signed', ['reason']
        )

        # ========== Expiry Reaper Metrics ==========
        self.reaper_reclaimed_tickets = Counter(
            'nft_reaper_reclaimed_tickets_total', 'Expired reservations deleted by the reaper'
        )

        self.reaper_expired_purchases = Counter(
            'nft_reaper_expired_purchases_total', 'Purchases moved to EXPIRED by the reaper'
        )

        self.reaper_runs = Counter(
            'nft_reaper_runs_total', 'Reaper sweeps by outcome', ['result']
        )

        # ========== Collaborator Metrics ==========
        self.collaborator_request_duration = Histogram(
            'nft_collaborator_request_duration_seconds',
            'Outbound request latency',
            ['service', 'operation', 'result'],
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
        )

    # ========== Helper Methods ==========

    def record_purchase(self, *, ticket_type_id: str, result: str, duration: float):
        self.purchase_requests.labels(ticket_type_id=ticket_type_id, result=result).inc()
        self.purchase_duration.labels(ticket_type_id=ticket_type_id).observe(duration)

    def record_confirmation(self, *, result: str):
        self.purchase_confirmations.labels(result=result).inc()

    def record_minted(self, *, event_id: str, count: int):
        self.tickets_minted.labels(event_id=event_id).inc(count)

    def update_availability(self, *, ticket_type_id: str, available: int):
        self.ticket_availability.labels(ticket_type_id=ticket_type_id).set(available)

    def record_check_in(self, *, result: str):
        self.check_ins.labels(result=result).inc()

    def record_qr_code_issued(self, *, reason: str):
        self.qr_codes_issued.labels(reason=reason).inc()

    def record_reaper_run(self, *, result: str, deleted_tickets: int = 0, expired_purchases: int = 0):
        self.reaper_runs.labels(result=result).inc()
        self.reaper_reclaimed_tickets.inc(deleted_tickets)
        self.reaper_expired_purchases.inc(expired_purchases)

    def record_collaborator_call(
        self, *, service: str, operation: str, result: str, duration: float
    ):
        self.collaborator_request_duration.labels(
            service=service, operation=operation, result=result
        ).observe(duration)


# Global metrics instance
metrics = TicketingMetrics()
