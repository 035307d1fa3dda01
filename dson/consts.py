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

# Fixed sizes of the DSON layout, these are not configurable.

HEADER_LENGTH = 64

META1_ENTRY_SIZE = 16

META2_ENTRY_SIZE = 12

# payloads of 4 bytes or more start at a multiple of this, relative to the data block
DATA_ALIGNMENT = 4

# strings with this prefix are stored as the hash of the rest of the string
HASHED_STRING_PREFIX = '###'

# payloads of at least this many bytes are aligned, shorter ones are packed right after the field name
ALIGNED_PAYLOAD_MIN_SIZE = 4

# the revision is stored as a signed 32-bit int in the header
MIN_REVISION = -(1 << 31)
MAX_REVISION = (1 << 31) - 1
