"""Quick demo of the tactsynth API: build a two-channel composition and save it as WAV."""

import tactsynth as ts

# Two channels: a melody and a quieter chord line, four beats per measure.
composition = ts.parse_composition(
    {
        "bpm": 96,
        "channels": [{"volume": 0.6}, {"volume": 0.3}],
        "composition": [
            {
                "channels": [
                    [[{"note": n, "len": 1.0}] for n in ("c2", "e2", "g2", "c3")],
                    [[{"note": n, "len": 4.0} for n in ("c1", "e1", "g1")]],
                ]
            },
            {
                "channels": [
                    [[{"note": n, "len": 1.0}] for n in ("h1", "g1", "d2", "p")],
                    [[{"note": n, "len": 4.0} for n in ("g1", "h1", "d2")]],
                ]
            },
        ],
    }
)

# Render straight into a WAV file, one write per measure
with ts.WavSink("demo.wav") as sink:
    ts.CompositionRenderer(sink).render(composition)
