BAND = {
    "name": "Moongold",
    "genres": ["funk", "soul", "blues", "jazz", "gogo", "go-go", "go go"],
    "sites": [
        "cometPingPong",
        "quarryHouseTavern",
        "unionStage",
        "dc9",
        "madamsOrgan",
        "ramsHead",
    ],
    # Acts that look relevant but aren't gigs we can share a bill with
    "filter": [
        "Moran-Tripp Band",
        "Moran Tripp Band",
        "Latin Blues Funk",
        "Human Country Jukebox featuring Jack Gregori",
        "Madams Dance Party",
        "Groovenix",
        "Alain Nu (Magician)",
    ],
}
