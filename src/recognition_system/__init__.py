"""Recognition System package.

Employee-of-the-month cycles: nominations, votes and results. Organized by
feature modules (users, cycles, nominations, votes, results) with a thin
Flask controller layer over service/repository layers.
"""
