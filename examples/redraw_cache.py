import logging

import linemesh

logging.basicConfig(level=logging.DEBUG)

doc = linemesh.read_dict(
    {
        "entities": [
            {"type": "LINE", "handle": "10", "start": [0, 0, 0], "end": [3, 4, 0]},
            {"type": "CIRCLE", "handle": "11"},
        ],
    }
)
drawer = linemesh.LineEntityDrawer(doc)
drawer.draw()
drawer.draw()
print("cached entries:", len(drawer.cache))
