"""Room session services: team balancing, scoring, prompts and turn timers.

Everything here works on ``Room`` rows through ``RoomStore`` and raises
``supp_trivia.errors`` exceptions; HTTP and socket transports stay in
``supp_trivia.api`` and ``supp_trivia.socketio_events``.
"""
