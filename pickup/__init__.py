"""
Pickup Games - coordination site for pickup sports games

Responsibilities:
- Game hosting, listing and search
- Joining a game's roster without overbooking it
- Player profile cards
- Sign-in through Firebase Authentication
"""
