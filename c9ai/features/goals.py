"""Goal runner - breaks a goal into steps and executes them in order

Each step goes through the same resolution chain as typed input. The first
step that cannot be resolved or fails stops the run; the rest of the goal is
handed to the current cloud model.
"""

import re
import logging
from typing import Any, Callable, Dict, List

from ..core.errors import C9AIError
from ..core.resolution import Conversational, CreateFile, Failure

STEP_SPLIT_RE = re.compile(r"\s*(?:;|\band then\b|\bthen\b)\s*", re.IGNORECASE)


def split_steps(goal: str) -> List[str]:
    return [step.strip(" ,.") for step in STEP_SPLIT_RE.split(goal) if step.strip(" ,.")]


class GoalRunner:
    def __init__(self, supervisor, dispatcher, cloud=None, current_model: Callable[[], str] = lambda: "claude", max_iterations: int = 20):
        self.supervisor = supervisor
        self.dispatcher = dispatcher
        self.cloud = cloud
        self.current_model = current_model
        self.max_iterations = max_iterations

    def run(self, goal: str) -> Dict[str, Any]:
        """Execute a goal step by step.

        Returns:
            {
                "status": "success" | "error" | "empty",
                "results": [{"step": ..., "status": ..., "output": ...}],
                "remaining": [...] steps not attempted
            }
        """
        steps = split_steps(goal)
        if not steps:
            print("❌ Please describe a goal, e.g. achieve compile research paper then open research_paper.pdf")
            return {"status": "empty", "results": [], "remaining": []}

        if len(steps) > self.max_iterations:
            logging.warning(f"Goal has {len(steps)} steps, limiting to {self.max_iterations}")
            steps = steps[:self.max_iterations]

        print(f"\n🎯 Goal: {goal}")
        print(f"📝 Plan: {len(steps)} step(s)")
        results = []
        for index, step in enumerate(steps, 1):
            print(f"\n[{index}/{len(steps)}] {step}")
            outcome = self._run_step(step)
            results.append(outcome)
            if outcome["status"] != "success":
                remaining = steps[index - 1:]
                self._hand_off(goal, remaining, outcome)
                return {"status": "error", "results": results, "remaining": remaining[1:]}

        print(f"\n✅ Goal complete ({len(results)} step(s))")
        return {"status": "success", "results": results, "remaining": []}

    def _run_step(self, step: str) -> Dict[str, Any]:
        resolution = self.supervisor.resolve(step)

        if isinstance(resolution, Failure):
            print(f"❌ {resolution.render()}")
            return {"step": step, "status": "error", "output": resolution.detail}

        if isinstance(resolution, Conversational):
            print(f"💬 {resolution.text}")
            return {"step": step, "status": "success", "output": resolution.text}

        if isinstance(resolution, CreateFile):
            path = self.dispatcher.create_file(resolution)
            return {"step": step, "status": "success", "output": str(path)}

        try:
            output = self.dispatcher.execute(resolution)
        except C9AIError as e:
            print(f"❌ Step failed: {e}")
            return {"step": step, "status": "error", "output": str(e)}

        if output:
            print(output)
        print(f"✅ {resolution.verb} {resolution.target}".rstrip())
        return {"step": step, "status": "success", "output": output}

    def _hand_off(self, goal: str, remaining: List[str], failure: Dict[str, Any]):
        model = self.current_model()
        if self.cloud is None or model not in ("claude", "gemini"):
            print("💡 Switch to a cloud model (switch claude) to get help finishing this goal")
            return
        prompt = (
            f"I'm working towards this goal: {goal}\n"
            f'The step "{failure["step"]}" failed: {failure["output"]}\n'
            f"Remaining steps: {'; '.join(remaining)}\n"
            "Please help me complete it step by step."
        )
        self.cloud.start_session(model, prompt)
