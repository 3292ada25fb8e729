"""
Car recommendation engine.

Responsibilities:
- Load the static car catalog.
- Score each car against the user's preferences (budget, body and fuel
  type, efficiency, safety, seating, features, segment priorities).
- Re-rank with preference/car vector similarity and diversify the result
  set with k-means clustering over price and efficiency.
- Return structured recommendations ready for API serialisation.
"""
