import linemesh
import matplotlib.pyplot as plt

doc = linemesh.read_dict(
    {
        "entities": [
            {
                "type": "LWPOLYLINE",
                "handle": "2A",
                "lineTypeName": "DASHED",
                "colorNumber": 1,
                "vertices": [
                    {"x": 0, "y": 0, "bulge": 1.0},
                    {"x": 4, "y": 0, "bulge": -1.0},
                    {"x": 8, "y": 0},
                ],
            },
        ],
        "tables": {"ltypes": {"DASHED": {"pattern": [0.5, -0.25]}}},
    }
)
doc.plot(title="bulges", show=False)
plt.savefig("bulges.png", dpi=150)
