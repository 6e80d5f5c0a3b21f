class BroadcastNetwork:
    """
    Every active agent hears every other active agent. Range filtering is a
    steering concern, so nothing is dropped here; signal strength and latency
    are bookkeeping values on the mission, not delivery parameters.
    """

    def deliver(self, messages):
        """
        messages: list[(sender_id, SwarmMessage)]
        returns: dict[receiver_id -> list[SwarmMessage]]
        """
        inbox = {sender_id: [] for sender_id, _ in messages}
        for sender_id, msg in messages:
            for recv_id, received in inbox.items():
                if recv_id == sender_id:
                    continue
                received.append(msg)
        return inbox
