"""Functions that carry out repository operations and print their reports."""