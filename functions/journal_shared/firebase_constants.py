# Copyright 2025 Google LLC
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
# ==============================================================================

USERS_COLLECTION = "users"
JOURNALS_COLLECTION = "journals"
APP_DATA_COLLECTION = "app-data"
SEED_MARKERS_COLLECTION = "seed-markers"

# Documents inside APP_DATA_COLLECTION.
APP_SETTINGS_DOC = "app-settings"

# Seed targets; each one is guarded by its own marker document.
SEED_TARGET_USERS = USERS_COLLECTION
SEED_TARGET_JOURNALS = JOURNALS_COLLECTION
SEED_TARGET_CATEGORIES = "journal-categories"

# Firestore batches are capped at 500 writes.
FIRESTORE_BATCH_LIMIT = 500
