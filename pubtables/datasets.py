"""
Small bundled datasets for examples and tests.

- exibble(): 8 rows, one column per common dtype, with missing values
- gtcars(): a handful of sports cars with power/torque figures and prices
"""

import numpy as np
import pandas as pd


def exibble() -> pd.DataFrame:
    """
    Return the 8-row example frame.

    Columns: num (float), char (str), fctr (categorical), date (datetime at
    midnight), time (str 'HH:MM'), datetime (datetime), currency (float),
    row ('row_1'..'row_8') and group ('grp_a' x4, 'grp_b' x4). Every column
    except fctr, row and group holds one missing value.
    """
    return pd.DataFrame({
        'num': [0.1111, 2.222, 33.33, 444.4, 5550.0, np.nan, 777000.0, 8880000.0],
        'char': ['apricot', 'banana', 'coconut', 'durian', np.nan, 'fig', 'grapefruit', 'honeydew'],
        'fctr': pd.Categorical(
            ['one', 'two', 'three', 'four', 'five', 'six', 'seven', 'eight'],
            categories=['one', 'two', 'three', 'four', 'five', 'six', 'seven', 'eight'],
        ),
        'date': pd.to_datetime([
            '2015-01-15', '2015-02-15', '2015-03-15', '2015-04-15',
            '2015-05-15', '2015-06-15', None, '2015-08-15',
        ]),
        'time': ['13:35', '14:40', '15:45', '16:50', '17:55', np.nan, '19:10', '20:20'],
        'datetime': pd.to_datetime([
            '2018-01-01 02:22', '2018-02-02 14:33', '2018-03-03 03:44', '2018-04-04 15:55',
            '2018-05-05 04:00', '2018-06-06 16:11', '2018-07-07 05:22', None,
        ]),
        'currency': [49.95, 17.95, 1.39, 65100.0, 1325.81, 13.255, np.nan, 0.44],
        'row': [f'row_{i}' for i in range(1, 9)],
        'group': ['grp_a'] * 4 + ['grp_b'] * 4,
    })


def gtcars() -> pd.DataFrame:
    """
    Return a small frame of sports cars.

    Columns: mfr, model, year, hp, hp_rpm, trq (lb-ft), trq_rpm, msrp (USD)
    and ctry_origin.
    """
    records = [
        ('Ford', 'GT', 2017, 647, 6250, 550, 5900, 447000, 'United States'),
        ('Ferrari', '458 Speciale', 2015, 597, 9000, 398, 6000, 291744, 'Italy'),
        ('Ferrari', '458 Spider', 2015, 562, 9000, 398, 6000, 263553, 'Italy'),
        ('Ferrari', '488 GTB', 2016, 661, 8000, 561, 3000, 245400, 'Italy'),
        ('Lamborghini', 'Aventador', 2015, 700, 8250, 507, 5500, 397500, 'Italy'),
        ('Lamborghini', 'Huracan', 2015, 610, 8250, 413, 6500, 237250, 'Italy'),
        ('Porsche', '718 Boxster', 2017, 300, 6500, 280, 1950, 56000, 'Germany'),
        ('Porsche', '911', 2016, 350, 7400, 287, 1700, 84300, 'Germany'),
        ('BMW', 'i8', 2016, 357, 5800, 420, 3700, 140700, 'Germany'),
        ('Audi', 'R8', 2015, 430, 7900, 317, 4500, 115900, 'Germany'),
        ('Aston Martin', 'Vantage', 2016, 430, 7300, 361, 5000, 103300, 'United Kingdom'),
    ]
    columns = ['mfr', 'model', 'year', 'hp', 'hp_rpm', 'trq', 'trq_rpm', 'msrp', 'ctry_origin']
    return pd.DataFrame.from_records(records, columns=columns)


__all__ = ['exibble', 'gtcars']
