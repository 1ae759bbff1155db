"""
Drive the live iteration engine the way an interactive view would:
seed, tick, pause, scrub back, resume, and plot the final snapshot.
"""

from __future__ import annotations
from chaoslab import IterationEngine, get_map
from chaoslab.plot import export, iteration

logistic = get_map("logistic")
engine = IterationEngine(logistic, iterates=2000, lag=30, speed=25)

@engine.on_state_change
def report(eng):
    st = eng.get_state()
    if st.detected_period and st.step == st.max_step:
        print(f"step {st.step}: period {st.detected_period}")

engine.seed(0.3, 0.3)
for _ in range(10):
    engine.advance()

engine.pause()
engine.set_playback_step(5)
print("scrubbed to", engine.get_state().step, "of", engine.get_state().max_step)
engine.resume()

state = engine.run_until_done()
print(engine)

iteration(state, logistic.bounds)
export.show()
