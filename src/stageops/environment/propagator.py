"""
Fan-out of env file reads and writes across the regions of a stage.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

from ..config import ALL_REGIONS, LOCAL_STAGE
from ..context import DeployContext
from ..results import Result
from .envfile import EnvMap, is_valid_env_token, serialize_env
from .store import EnvConfigStore, EnvLocation

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RegionEnv:
    """Env file fetched for one region."""

    region_name: str
    result: Result[EnvMap]

    @property
    def vars(self) -> Dict[str, str]:
        return self.result.value.values

    @property
    def raw(self) -> bytes:
        return self.result.value.raw

    @property
    def is_partial(self) -> bool:
        return self.result.is_partial


@dataclass(frozen=True)
class RegionWrite:
    """Outcome of writing one region's env file."""

    region_name: str
    body: str
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_concurrently(tasks: Sequence[Callable[[], T]]) -> List[T]:
    """Run every task on its own thread and return results in task order."""
    if not tasks:
        return []
    with ThreadPoolExecutor(max_workers=len(tasks)) as pool:
        futures = [pool.submit(task) for task in tasks]
        return [future.result() for future in futures]


class EnvPropagator:
    """Read and modify env files for one region or every region of a stage."""

    def __init__(self, store: Optional[EnvConfigStore] = None):
        self.store = store or EnvConfigStore()

    def _targets(
        self, stage: str, region: str, context: DeployContext
    ) -> List[Tuple[str, EnvLocation]]:
        project = context.project

        if stage == LOCAL_STAGE:
            return [(LOCAL_STAGE, self.store.locate(stage, LOCAL_STAGE, context))]

        if region == ALL_REGIONS:
            names = [r.region for r in project.regions_for(stage)]
        else:
            names = [project.region_config(stage, region).region]

        return [(name, self.store.locate(stage, name, context)) for name in names]

    def _fetch(
        self, targets: List[Tuple[str, EnvLocation]]
    ) -> List[RegionEnv]:
        return run_concurrently(
            [
                lambda name=name, location=location: RegionEnv(
                    name, self.store.read(location)
                )
                for name, location in targets
            ]
        )

    def fetch_all(self, stage: str, region: str, context: DeployContext) -> List[RegionEnv]:
        """
        Fetch env files for a stage.

        Args:
            stage: Stage name, or "local" for the project's back/.env
            region: Region name, or "all" for every region of the stage
            context: Deployment context

        Returns:
            One RegionEnv per region, in the stage's configured order
        """
        targets = self._targets(stage, region, context)
        logger.info(
            f"Fetching env for stage {stage} from {len(targets)} region(s)"
        )
        return self._fetch(targets)

    def write_all(
        self, targets: List[Tuple[str, EnvLocation]], bodies: List[str]
    ) -> List[RegionWrite]:
        """Write every region and report each region's outcome."""

        def write(name: str, location: EnvLocation, body: str) -> RegionWrite:
            try:
                self.store.write(location, body)
            except Exception as e:
                logger.error(f"Failed to write env for {name}: {e}")
                return RegionWrite(name, body, e)
            return RegionWrite(name, body)

        return run_concurrently(
            [
                lambda name=name, location=location, body=body: write(
                    name, location, body
                )
                for (name, location), body in zip(targets, bodies)
            ]
        )

    def apply_all(
        self,
        stage: str,
        region: str,
        mutate: Callable[[Dict[str, str]], None],
        context: DeployContext,
    ) -> List[RegionWrite]:
        """
        Fetch, modify, and write back env files for a stage.

        ``mutate`` edits each region's values in place. All writes are
        attempted. If any failed, the first failure in region order is raised
        once every write has finished; regions that were written stay written.

        Returns:
            Per-region write outcomes, all successful
        """
        targets = self._targets(stage, region, context)
        fetched = self._fetch(targets)

        bodies = []
        for region_env in fetched:
            values = dict(region_env.vars)
            mutate(values)
            bodies.append(serialize_env(values))

        outcomes = self.write_all(targets, bodies)
        for outcome in outcomes:
            if not outcome.ok:
                raise outcome.error
        return outcomes

    def unset_key(
        self, stage: str, region: str, key: str, context: DeployContext
    ) -> List[RegionWrite]:
        """Remove ``key`` from the env of one region or all regions."""
        outcomes = self.apply_all(
            stage, region, lambda values: values.pop(key, None), context
        )
        logger.info(f"Successfully unset env var: {key}")
        return outcomes

    def set_key(
        self, stage: str, region: str, key: str, value: str, context: DeployContext
    ) -> List[RegionWrite]:
        """Set ``key`` to ``value`` in the env of one region or all regions."""
        if not key or not is_valid_env_token(key) or not is_valid_env_token(value):
            raise ValueError(
                "Env keys and values must not contain '=' or line breaks"
            )

        outcomes = self.apply_all(
            stage, region, lambda values: values.__setitem__(key, value), context
        )
        logger.info(f"Successfully set env var: {key}")
        return outcomes
