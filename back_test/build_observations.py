from fractal.core.base import Observation
from datetime import datetime, timedelta, UTC
from typing import List
import pandas as pd
from allocator.constants import ALLOCATOR_NAME, POOL_NAMES
from allocator.entities.allocator_vault import AllocatorVaultGlobalState
from back_test.entities.simulated_pool import SimulatedPoolGlobalState
from back_test.loader.simulations.deposit_loader import DepositLoader

def observations_from_frame(deposits_df: pd.DataFrame, pool_names: List[str] = POOL_NAMES) -> List[Observation]:
    """
    Build one observation per row of a simulated deposit frame.

    Returns:
        List[Observation]: Observations containing the allocator and pool states for each row
    """
    observations: List[Observation] = []
    # set timestamp as index if it is not set
    if 'timestamp' in deposits_df.columns:
        deposits_df = deposits_df.set_index('timestamp')

    for timestamp, row in deposits_df.sort_index().iterrows():
        states = {
            ALLOCATOR_NAME: AllocatorVaultGlobalState(deposits=int(row['deposits']))
        }
        for pool_name in pool_names:
            available = bool(row[f'{pool_name}_available'])
            states[pool_name] = SimulatedPoolGlobalState(deposits_enabled=available, withdrawals_enabled=available)

        # Convert timestamp to datetime if it is string
        if isinstance(timestamp, str):
            timestamp = pd.to_datetime(timestamp)
        observations.append(Observation(timestamp=timestamp, states=states))

    return observations

def build_observations(with_run: bool = True, days: int = 180, deposit_limit: int = 10_000_000_000,
                       outage_probability: float = 0.02) -> List[Observation]:
    """
    Build observations list from a simulated deposit flow, grouped by day.

    Returns:
        List[Observation]: List of observations containing allocator and pool states for each day
    """
    end_time = datetime.now(UTC).replace(hour=0, minute=0, second=0, microsecond=0, tzinfo=None)
    start_time = end_time - timedelta(days=days)
    deposits_df = DepositLoader(
        deposit_limit, POOL_NAMES, start_time, end_time, outage_probability=outage_probability
    ).read(with_run=with_run)
    return observations_from_frame(deposits_df)

if __name__ == "__main__":
    observations = build_observations()
