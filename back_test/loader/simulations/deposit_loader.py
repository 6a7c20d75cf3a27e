import random
from pathlib import Path
from typing import List
import pandas as pd
from fractal.loaders.base_loader import Loader
from datetime import datetime

class DepositLoader(Loader):
    """
    A class that represents an allocator deposit flow loader.

    This loader performs Monte Carlo simulation for each data point

    Attributes:
        deposit_simulation_limit: The upper bound of a single deposit, in units of the underlying asset
        pool_names: The names of the pools whose availability is simulated
        start_time: The start time of the simulation
        end_time: The end time of the simulation
        outage_probability: The probability that a pool refuses deposits and withdrawals on a given day
        seed (int): The seed value used for random number generation.
        interval: The interval of observations

    Methods:
        extract(): Builds the date index of the simulation.
        transform(): Performs Monte Carlo simulation of deposits and pool outages.
        load(): Saves the simulated deposits using the specified loader type.
        read(with_run: bool = False): Reads the simulated
            deposits from the saved file.
        run(): Executes the entire process of extracting,
            transforming, and loading the data.
    """

    def __init__(
        self,
        deposit_simulation_limit: int,
        pool_names: List[str],
        start_time: datetime,
        end_time: datetime,
        outage_probability: float = 0.0,
        seed: int = 420,
        interval: str = 'd',
    ) -> None:
        super().__init__()
        self._data = None
        self.deposit_simulation_limit = deposit_simulation_limit
        self.pool_names = pool_names
        self.start_time = start_time
        self.end_time = end_time
        self.outage_probability = outage_probability
        self.interval = interval
        self._file_id = "allocator_simulated_deposits"
        self._random = random.Random()
        self._random.seed(seed)

    def extract(self):
        self._data = pd.DataFrame(index=pd.date_range(start=self.start_time, end=self.end_time, freq=self.interval, tz=None))
        # set index field name as 'timestamp'
        self._data.index.name = 'timestamp'

    def transform(self):
        deposits = []
        availability = {pool_name: [] for pool_name in self.pool_names}
        for _ in range(len(self._data)):
            # no deposit on roughly a third of the days
            if self._random.randint(0, 2) == 0:
                deposits.append(0)
            else:
                deposits.append(self._random.randint(1, self.deposit_simulation_limit))
            for pool_name in self.pool_names:
                availability[pool_name].append(self._random.random() >= self.outage_probability)
        self._data['deposits'] = deposits
        for pool_name in self.pool_names:
            self._data[f'{pool_name}_available'] = availability[pool_name]

    def load(self):
        self._load(self._file_id)

    def read(self, with_run: bool = False) -> pd.DataFrame:
        if with_run:
            self.run()
        else:
            self._read(self._file_id)

        return self._data

    def delete_dump_file(self):
        Path(self.file_path(self._file_id)).unlink(missing_ok=True)
