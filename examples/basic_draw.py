import linemesh

doc = linemesh.read_dict(
    {
        "entities": [
            {"type": "LINE", "handle": "1A", "start": {"x": 0, "y": 0}, "end": {"x": 10, "y": 5}},
            {
                "type": "LWPOLYLINE",
                "handle": "1B",
                "shape": True,
                "vertices": [
                    {"x": 0, "y": 0, "bulge": 0.5},
                    {"x": 10, "y": 0},
                    {"x": 10, "y": 10},
                ],
            },
        ],
    }
)

group = linemesh.draw(doc)
for line in group:
    print(line.name, len(line.geometry), line.position, line.scale)
