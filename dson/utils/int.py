#  Copyright 2025 Hathor Labs
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#  http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.


def round_up_to_multiple(n: int, m: int) -> int:
    """
    Returns the smallest multiple of `m` that is greater than or equal to `n`.

    >>> round_up_to_multiple(0, 4)
    0
    >>> round_up_to_multiple(4, 4)
    4
    >>> round_up_to_multiple(5, 4)
    8
    >>> round_up_to_multiple(7, 4)
    8
    """
    assert m > 0
    return -(-n // m) * m


def padding_to_multiple(n: int, m: int) -> int:
    """
    Returns how many units must be added to `n` to reach the next multiple of `m`.

    >>> padding_to_multiple(4, 4)
    0
    >>> padding_to_multiple(5, 4)
    3
    """
    return round_up_to_multiple(n, m) - n
