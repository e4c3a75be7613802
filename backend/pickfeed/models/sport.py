from enum import Enum


class Sport(str, Enum):
    NBA = "nba"
    MLB = "mlb"
    NFL = "nfl"
    NHL = "nhl"
