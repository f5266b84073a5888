#!/usr/bin/env python3
#
# Copyright 2022 Max Planck Insitute Magdeburg
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
#
#
"""Static names and numeric constants used in the fieldlinalg package

    Scalar domains

        FLOAT = 'float'

        COMPLEX = 'complex'

        RATIONAL = 'rational'

    Tolerances

        ZERO_TOLERANCE = 1e-5  # |x| below this counts as zero (float, complex)

        EQUALITY_REL_TOL = 1e-5  # relative tolerance of element equality

        EQUALITY_ABS_TOL = 1e-5  # absolute floor of element equality

    Fixed-width limits of ExactRational

        INT32_MIN, INT32_MAX, INT64_MAX

        FLOAT_CONVERSION_LIMIT = INT64_MAX // 2
"""

import numpy as np

# Scalar domains
FLOAT = 'float'
COMPLEX = 'complex'
RATIONAL = 'rational'
DOMAINS = (FLOAT, COMPLEX, RATIONAL)

# Tolerances
ZERO_TOLERANCE = 1e-5
EQUALITY_REL_TOL = 1e-5
EQUALITY_ABS_TOL = 1e-5

# Fixed-width limits
INT32_MIN = int(np.iinfo(np.int32).min)
INT32_MAX = int(np.iinfo(np.int32).max)
INT64_MAX = int(np.iinfo(np.int64).max)
FLOAT_CONVERSION_LIMIT = INT64_MAX // 2

# Text tokens
NAN_TOKEN = 'NaN'
POS_INF_TOKEN = 'Infinity'
NEG_INF_TOKEN = '-Infinity'
EMPTY_SOLUTION = 'Empty'
